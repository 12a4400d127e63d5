"""wpclone database name validation"""
import re

from wpc.core.errors import InvalidNameError, ValidationError
from wpc.core.logging import Log
from wpc.core.variables import WPCVar


class WPCDatabaseName:
    """Validates database identifiers before they reach any SQL statement"""

    _ALLOWED = re.compile(r'^[a-zA-Z0-9_$]+$')
    _STRICT = re.compile(r'^[A-Za-z0-9_]+$')
    _DANGEROUS = (
        re.compile(r'--'),
        re.compile(r';'),
        re.compile(r'/\*'),
        re.compile(r'\*/'),
        re.compile(r'\b(drop|delete|truncate|alter)\b', re.IGNORECASE),
    )

    @staticmethod
    def validate(self, name, role='Target'):
        """Return the trimmed name, or raise InvalidNameError.

        Checks run in a fixed order so the same input always yields the
        same message.
        """
        name = (name or '').strip()
        label = f"{role} database name"

        if not name:
            raise InvalidNameError(f"{label} cannot be empty.")
        if len(name) > WPCVar.wpc_db_name_max_length:
            raise InvalidNameError(
                f"{label} exceeds the maximum length of "
                f"{WPCVar.wpc_db_name_max_length} characters.")
        if not WPCDatabaseName._ALLOWED.match(name):
            raise InvalidNameError(
                f"{label} contains invalid characters. Only letters, "
                "numbers, underscores, and dollar signs are allowed.")
        if name[0].isdigit():
            raise InvalidNameError(f"{label} cannot start with a number.")
        if name.lower() in WPCVar.wpc_reserved_db_names:
            raise InvalidNameError(
                f"{label} '{name}' is reserved and cannot be used.")
        for pattern in WPCDatabaseName._DANGEROUS:
            if pattern.search(name):
                raise InvalidNameError(
                    f"{label} contains potentially dangerous patterns.")

        Log.debug(self, f"{label} '{name}' is valid")
        return name

    @staticmethod
    def validate_table_prefix(prefix):
        if not prefix or not WPCDatabaseName._STRICT.match(prefix):
            raise ValidationError(f"Invalid WordPress table prefix '{prefix}'")
        return prefix

    @staticmethod
    def validate_for_provisioning(self, name, role='Target'):
        """Stricter rule for databases that WordPress will be installed on."""
        if not WPCDatabaseName._STRICT.match(name):
            raise InvalidNameError(
                f"{role} database name may only contain letters, numbers "
                "and underscores for a full clone.")
        return name
