"""Pre-mutation validation of a resolved clone request"""
import os

from wpc.core.dbvalidate import WPCDatabaseName
from wpc.core.errors import MissingFieldError, ValidationError
from wpc.core.fileutils import WPCFileUtils
from wpc.core.logging import Log
from wpc.core.models import CloneType


class ConfigValidator:
    """Rejects a request before anything is created or copied."""

    FILE_FIELDS = (
        ('sourcePath', lambda c: c.source_path),
        ('targetPath', lambda c: c.target_path),
    )
    DB_FIELDS = (
        ('sourceDbHost', lambda c: c.source_db.host),
        ('sourceDbName', lambda c: c.source_db.name),
        ('sourceDbUser', lambda c: c.source_db.user),
        ('sourceDbPass', lambda c: c.source_db.password),
        ('targetDbHost', lambda c: c.target_db.host),
        ('targetDbName', lambda c: c.target_db.name),
        ('targetDbUser', lambda c: c.target_db.user),
        ('targetDbPass', lambda c: c.target_db.password),
    )

    def __init__(self, controller, settings):
        self.controller = controller
        self.settings = settings

    def validate(self, config):
        if config.clone_type not in CloneType.ALL:
            raise ValidationError(
                f"Invalid clone type '{config.clone_type}'. "
                f"Expected one of: {', '.join(CloneType.ALL)}")

        self._check_required(config)
        if config.needs_database:
            self._check_databases(config)
        if config.needs_files:
            self._check_paths(config)
        Log.debug(self.controller, "Clone request is valid")

    def _check_required(self, config):
        fields = ()
        if config.needs_files:
            fields += self.FILE_FIELDS
        if config.needs_database:
            fields += self.DB_FIELDS
        for name, getter in fields:
            if not getter(config):
                raise MissingFieldError(name)

    def _check_databases(self, config):
        source = WPCDatabaseName.validate(
            self.controller, config.source_db.name, 'Source')
        target = WPCDatabaseName.validate(
            self.controller, config.target_db.name, 'Target')
        if config.needs_provisioning:
            WPCDatabaseName.validate_for_provisioning(
                self.controller, target, 'Target')
        if (source == target and
                config.source_db.host.lower() == config.target_db.host.lower()):
            raise ValidationError(
                "Source and target database cannot be the same")

    def _check_paths(self, config):
        base = self.settings.base_path
        source, target = config.source_path, config.target_path
        if os.path.realpath(source) == os.path.realpath(target):
            raise ValidationError("Source and clone name cannot be the same")

        for role, path in (('Source', source), ('Clone', target)):
            if not WPCFileUtils.is_within(path, base):
                raise ValidationError(
                    f"{role} path {path} is outside of {base}")

        if WPCFileUtils.is_within(target, source):
            raise ValidationError(
                f"Clone name {target} cannot be inside source {source}")
        if WPCFileUtils.is_within(source, target):
            raise ValidationError(
                f"Source {source} cannot be inside clone name {target}")
        if os.path.lexists(target):
            raise ValidationError(f"Clone name {target} already exists")
        if not os.path.isdir(source):
            raise ValidationError(f"Source {source} does not exist")
