'''
Integer width and error helper tests
'''

from pytest import raises

from irpn.util import DomainError, RPNError, fits, restoring, wrap


def test_wrap():
    assert wrap(2**63) == -2**63
    assert wrap(-2**63 - 1) == 2**63 - 1
    assert wrap(255, bits=8) == -1
    assert wrap(-129, bits=8) == 127
    assert wrap(42, bits=8) == 42


def test_fits():
    assert fits(2**63 - 1)
    assert not fits(2**63)
    assert fits(-128, bits=8)
    assert not fits(-129, bits=8)


class Pushes:
    def __init__(self):
        self.pushed = []

    def push(self, *values):
        self.pushed.extend(values)


def test_restoring():
    @restoring
    def reject(machine, left, right):
        raise DomainError('no')

    machine = Pushes()
    with raises(RPNError):
        reject(machine, 1, 2)
    assert machine.pushed == [1, 2]


def test_restoring_passes_results():
    @restoring
    def add(machine, left, right):
        return left + right

    machine = Pushes()
    assert add(machine, 1, 2) == 3
    assert machine.pushed == []
