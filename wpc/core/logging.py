"""wpclone log module"""


class Log:
    """
        Logs messages with colors for different message types
    """
    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'
    ENDC = '\033[0m'

    def error(self, msg, exit=True):
        """
        Logs error into log file and closes the app when exit is set
        """
        self.app.log.error(Log.FAIL + msg + Log.ENDC)
        if exit:
            self.app.close(1)

    def info(self, msg):
        self.app.log.info(msg)

    def warn(self, msg):
        self.app.log.warning(Log.WARNING + msg + Log.ENDC)

    def debug(self, msg):
        self.app.log.debug(msg)

    def valide(self, msg):
        print(Log.OKBLUE + msg + "  [" + Log.ENDC + Log.OKGREEN + "OK" +
              Log.ENDC + Log.OKBLUE + "]" + Log.ENDC)
        self.app.log.info(msg)

    def failed(self, msg, reason=None):
        print(Log.OKBLUE + msg + "  [" + Log.ENDC + Log.FAIL + "KO" +
              Log.ENDC + Log.OKBLUE + "]" + Log.ENDC)
        if reason:
            print(Log.FAIL + reason + Log.ENDC)
        self.app.log.error(msg if not reason else f"{msg}: {reason}")
