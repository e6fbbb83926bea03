class CueScoreError(Exception):
    pass


class UnknownModeError(CueScoreError, KeyError):
    pass


class StateValidationError(CueScoreError, ValueError):
    pass


class UnsupportedActionError(CueScoreError, ValueError):
    pass
