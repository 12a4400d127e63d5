"""Turns a raw clone request into a ResolvedCloneConfig"""
import os

from wpc.core.models import DatabaseCredentials, ResolvedCloneConfig


def _text(raw, key):
    value = raw.get(key)
    return value.strip() if isinstance(value, str) else ''


class ConfigResolver:
    """Fills defaults and resolves relative paths. Performs no I/O."""

    def __init__(self, settings):
        self.settings = settings

    def _path(self, relative):
        if not relative:
            return ''
        joined = os.path.join(self.settings.base_path, relative)
        return joined.rstrip('/\\') or joined

    def _credentials(self, raw, prefix):
        return DatabaseCredentials(
            host=_text(raw, f'{prefix}DbHost') or self.settings.db_host,
            name=_text(raw, f'{prefix}DbName'),
            user=_text(raw, f'{prefix}DbUser') or self.settings.db_user,
            password=_text(raw, f'{prefix}DbPass') or self.settings.db_password,
        )

    def resolve(self, raw) -> ResolvedCloneConfig:
        raw = raw or {}
        return ResolvedCloneConfig(
            clone_type=_text(raw, 'cloneType').lower(),
            source_path=self._path(_text(raw, 'sourcePath')),
            target_path=self._path(_text(raw, 'targetPath')),
            target_name=_text(raw, 'targetPath').strip('/\\'),
            source_db=self._credentials(raw, 'source'),
            target_db=self._credentials(raw, 'target'),
            new_domain=_text(raw, 'newDomain').rstrip('/'),
        )
