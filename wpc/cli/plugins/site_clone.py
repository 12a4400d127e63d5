"""wpclone clone command"""
import json
import sys

from cement import Controller

from wpc.core.logging import Log
from wpc.core.models import CloneType
from wpc.core.pipeline import ClonePipeline
from wpc.core.settings import CloneSettings

# command line option -> request key
REQUEST_OPTIONS = (
    ('clone_type', 'cloneType'),
    ('source', 'sourcePath'),
    ('target', 'targetPath'),
    ('source_db_host', 'sourceDbHost'),
    ('source_db_name', 'sourceDbName'),
    ('source_db_user', 'sourceDbUser'),
    ('source_db_pass', 'sourceDbPass'),
    ('target_db_host', 'targetDbHost'),
    ('target_db_name', 'targetDbName'),
    ('target_db_user', 'targetDbUser'),
    ('target_db_pass', 'targetDbPass'),
    ('new_domain', 'newDomain'),
)


class WPCSiteCloneController(Controller):
    class Meta:
        label = 'clone'
        stacked_on = 'base'
        stacked_type = 'nested'
        description = 'clone a WordPress installation (files, database or both)'
        arguments = [
            (['-t', '--type'],
             dict(help='what to clone', dest='clone_type',
                  choices=CloneType.ALL)),
            (['--source'],
             dict(help='source directory, relative to the base path')),
            (['--target'],
             dict(help='clone directory, relative to the base path')),
            (['--source-db-host'], dict(help='source database host')),
            (['--source-db-name'], dict(help='source database name')),
            (['--source-db-user'], dict(help='source database user')),
            (['--source-db-pass'], dict(help='source database password')),
            (['--target-db-host'], dict(help='target database host')),
            (['--target-db-name'], dict(help='target database name')),
            (['--target-db-user'], dict(help='target database user')),
            (['--target-db-pass'], dict(help='target database password')),
            (['--new-domain'],
             dict(help='rewrite site URLs to this domain (full clones)')),
            (['--from-json'],
             dict(help='read the clone request from a JSON file, '
                       '"-" for stdin', metavar='FILE')),
            (['--json'],
             dict(help='print the result as JSON', action='store_true')),
            (['--dry-run'],
             dict(help='validate the request without changing anything',
                  action='store_true')),
        ]

    def _load_request(self, pargs):
        """Merge the JSON request (if any) with command line options."""
        request = {}
        if pargs.from_json:
            try:
                if pargs.from_json == '-':
                    request = json.load(sys.stdin)
                else:
                    with open(pargs.from_json, encoding='utf-8') as f:
                        request = json.load(f)
            except (OSError, ValueError) as e:
                Log.error(self, f"Unable to read clone request: {e}",
                          exit=False)
                return None
            if not isinstance(request, dict):
                Log.error(self, "Clone request must be a JSON object",
                          exit=False)
                return None

        for option, key in REQUEST_OPTIONS:
            value = getattr(pargs, option, None)
            if value is not None:
                request[key] = value
        return request

    def _print_outcome(self, outcome):
        steps = outcome.steps
        for index, step in enumerate(steps):
            if outcome.failed and index == len(steps) - 1:
                Log.failed(self, f"[{step.step}] {step.message}",
                           outcome.status.message)
            else:
                Log.valide(self, f"[{step.step}] {step.message}")
        if outcome.failed and not steps:
            print(Log.FAIL + outcome.status.message + Log.ENDC)
        elif not outcome.failed:
            print(Log.OKGREEN + outcome.status.message + Log.ENDC)
            if outcome.admin_url:
                print(f"Admin URL: {outcome.admin_url}")

    def _default(self):
        pargs = self.app.pargs
        request = self._load_request(pargs)
        if request is None:
            self.app.exit_code = 1
            return

        settings = CloneSettings.from_app(self.app)
        outcome = ClonePipeline(self, settings).run(
            request, dry_run=pargs.dry_run)

        if pargs.json:
            self.app.render(outcome.to_dict())
        else:
            self._print_outcome(outcome)

        if outcome.failed:
            self.app.exit_code = 1
