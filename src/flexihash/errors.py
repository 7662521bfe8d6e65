"""Exceptions raised by the ring and engine."""


class FlexihashError(RuntimeError):
    pass


class EmptyRingError(FlexihashError):
    pass


class TargetNotFoundError(FlexihashError, KeyError):
    def __init__(self, target: str):
        super().__init__(f"target {target!r} does not exist")
        self.target = target

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]


class InvalidArgumentError(FlexihashError, ValueError):
    pass
