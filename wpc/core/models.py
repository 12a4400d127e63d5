"""Value types passed between clone phases"""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Dict, Any


class CloneType:
    """Supported clone variants"""
    FULL = 'full'
    FILES = 'files'
    DATABASE = 'database'

    ALL = (FULL, FILES, DATABASE)


class StatusKind:
    INFO = 'info'
    SUCCESS = 'success'
    ERROR = 'error'


@dataclass(frozen=True)
class DatabaseCredentials:
    host: str = ''
    name: str = ''
    user: str = ''
    password: str = field(default='', repr=False)

    @property
    def masked(self) -> Dict[str, str]:
        return {
            'host': self.host,
            'name': self.name,
            'user': self.user,
            'password': '***' if self.password else '',
        }


@dataclass(frozen=True)
class ResolvedCloneConfig:
    """Clone request after trimming, defaulting and path resolution"""
    clone_type: str
    source_path: str = ''
    target_path: str = ''
    target_name: str = ''
    source_db: DatabaseCredentials = DatabaseCredentials()
    target_db: DatabaseCredentials = DatabaseCredentials()
    new_domain: str = ''

    @property
    def needs_files(self) -> bool:
        return self.clone_type in (CloneType.FULL, CloneType.FILES)

    @property
    def needs_database(self) -> bool:
        return self.clone_type in (CloneType.FULL, CloneType.DATABASE)

    @property
    def needs_provisioning(self) -> bool:
        return self.clone_type == CloneType.FULL

    def context(self) -> Dict[str, Any]:
        """Loggable view of the request, secrets masked."""
        return {
            'clone_type': self.clone_type,
            'source_path': self.source_path,
            'target_path': self.target_path,
            'source_db': self.source_db.masked,
            'target_db': self.target_db.masked,
            'new_domain': self.new_domain,
        }


@dataclass(frozen=True)
class StepRecord:
    step: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {'step': self.step, 'message': self.message}


@dataclass(frozen=True)
class CloneStatus:
    message: str = ''
    kind: str = StatusKind.INFO

    def to_dict(self) -> Dict[str, str]:
        # 'type' is the key the web form reads
        return {'message': self.message, 'type': self.kind}


@dataclass(frozen=True)
class CloneOutcome:
    """Immutable step log and final status of one clone run.

    Every phase returns a new outcome instead of mutating a shared one.
    """
    steps: Tuple[StepRecord, ...] = ()
    status: CloneStatus = CloneStatus()
    errors: Tuple[str, ...] = ()
    admin_url: Optional[str] = None

    def add_step(self, step: int, message: str) -> 'CloneOutcome':
        return replace(self, steps=self.steps + (StepRecord(step, message),))

    def extend(self, steps) -> 'CloneOutcome':
        return replace(self, steps=self.steps + tuple(steps))

    def with_admin_url(self, url: Optional[str]) -> 'CloneOutcome':
        return replace(self, admin_url=url)

    def succeed(self, message: str) -> 'CloneOutcome':
        return replace(self, status=CloneStatus(message, StatusKind.SUCCESS))

    def inform(self, message: str) -> 'CloneOutcome':
        return replace(self, status=CloneStatus(message, StatusKind.INFO))

    def fail(self, message: str) -> 'CloneOutcome':
        text = f"Error: {message}"
        return replace(self, status=CloneStatus(text, StatusKind.ERROR),
                       errors=self.errors + (text,))

    @property
    def failed(self) -> bool:
        return self.status.kind == StatusKind.ERROR

    @property
    def step_numbers(self) -> Tuple[int, ...]:
        return tuple(s.step for s in self.steps)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'steps': [s.to_dict() for s in self.steps],
            'status': self.status.to_dict(),
            'errors': list(self.errors),
        }
        if self.admin_url:
            data['adminUrl'] = self.admin_url
        return data


@dataclass(frozen=True)
class ProvisionResult:
    success: bool
    message: str
    admin_url: Optional[str] = None
    steps: Tuple[StepRecord, ...] = ()
    rolled_back: bool = False
