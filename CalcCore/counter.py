# counter.py

class Counter:
    """Counts the runs of a boolean state: each change from True to False adds one.

    Call check() without argument at the end to close the last run.
    """
    def __init__(self):
        self.count = 0
        self.state = False

    def check(self, state=False):
        if self.state and not state:
            self.count += 1
        self.state = bool(state)
        return self.count
