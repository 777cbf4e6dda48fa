class InputLogError(Exception):
    pass


class LogWriteError(InputLogError):
    pass


class SettingsError(InputLogError):
    pass
