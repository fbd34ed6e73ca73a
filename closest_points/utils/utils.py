import typing as t
from datetime import datetime


def timestamp_string():
    return datetime.now().strftime("%Y-%m-%d-%Hh%Mm%Ss_%f")


class KnnLog:
    def __init__(self, message: str, step: int, timestamp: str | None = None):
        self.message = message
        self.step = step
        self.timestamp = timestamp or timestamp_string()

    def __str__(self):
        return "At step {}: '{}'".format(self.step, self.message)


class KnnLogger(list[KnnLog]):
    def __init__(self, printout: bool = True, echo: t.Callable[[str], t.Any] = print):
        super(KnnLogger, self).__init__()
        self.printout = printout
        self.echo = echo

    def append(self, log: KnnLog):
        super(KnnLogger, self).append(log)
        if self.printout:
            self.echo(str(log))

    def messages(self) -> t.List[str]:
        return [log.message for log in self]
