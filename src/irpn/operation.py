'''
Operations understood by the stack machine.

An operation is what a token means: the lexer produces them, the machine
consumes them. They carry no behaviour of their own.
'''

from collections import namedtuple
from enum import Enum


class Op(Enum):
    # Arithmetic
    ADD = 'add'
    SUB = 'sub'
    MUL = 'mul'
    DIV = 'div'
    EXP = 'exp'
    SQUARE = 'square'
    DOUBLE = 'double'
    FACT = 'fact'
    INV = 'inv'

    # Whole stack
    SUM = 'sum'
    PROD = 'prod'
    SWAP = 'swap'
    CLEAR = 'clear'

    # Carrying an argument
    PUSH = 'push'
    VARINIT = 'varinit'
    VARREF = 'varref'

    NOOP = 'noop'


class Operation(namedtuple('Operation', 'op argument')):
    '''
    Immutable (op, argument) pair.

    argument is the literal for PUSH, the variable name for VARINIT and
    VARREF, and None otherwise.
    '''
    __slots__ = ()

    def __new__(cls, op, argument=None):
        return super().__new__(cls, op, argument)

    def __str__(self):
        if self.argument is None:
            return self.op.value
        return '{}({})'.format(self.op.value, self.argument)


NOOP = Operation(Op.NOOP)
