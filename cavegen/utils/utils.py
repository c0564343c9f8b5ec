import json
import sys
import typing as t
from datetime import datetime

# Neighborhoods, as (dx, dy) offsets. The chessboard ordering is the order in
# which the flood fill pushes cells, so it determines visiting order.
TAXI_NEIGHBORHOOD = ((1, 0), (0, 1), (-1, 0), (0, -1))
CHESSBOARD_NEIGHBORHOOD = (
    (1, 0),
    (0, 1),
    (-1, 0),
    (0, -1),
    (1, 1),
    (-1, 1),
    (-1, -1),
    (1, -1),
)
BLOCK_3X3 = ((0, 0),) + CHESSBOARD_NEIGHBORHOOD


def timestamp_string():
    return datetime.now().strftime("%Y-%m-%d-%Hh%Mm%Ss_%f")


class CaveGenLog:
    def __init__(self, message: str, step: int, timestamp: str | None = None):
        self.message = message
        self.step = step
        self.timestamp = timestamp if timestamp is not None else timestamp_string()

    def __str__(self):
        return "At step {}: '{}'".format(self.step, self.message)

    def toJSON(self):
        return json.dumps(self, default=lambda o: o.__dict__, sort_keys=True, indent=4)


class CaveGenLogger(list[CaveGenLog]):
    def __init__(self, printout: bool = True, stream: t.TextIO | None = None):
        super(CaveGenLogger, self).__init__()
        self.printout = printout
        self.stream = stream

    def append(self, log: CaveGenLog):
        super(CaveGenLogger, self).append(log)
        if self.printout:
            print(log, file=self.stream if self.stream is not None else sys.stdout)

    def messages(self) -> t.List[str]:
        return [log.message for log in self]
