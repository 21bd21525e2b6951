from collections import deque
from functools import partial, reduce
from inspect import signature as getsignature, Parameter
import logging

from .lexer import Lexer
from .operation import Op
from .util import (RPNError, StackUnderflow, DomainError, UnboundVariable,
                   restoring, wrap)


logger = logging.getLogger(__name__)


class Machine:
    '''
    Integer stack machine (RPN calculator).

    Holds a stack of fixed-width signed integers and a table of named
    registers. Runs one Operation at a time; runs whole lines through its
    lexer. Operations that cannot run (too few elements, unbound variable,
    operand out of domain) do nothing at all.

    :param lexer: Lexer used by eval. Its integer width and verbosity are the
                  machine's.
    '''

    def __init__(self, lexer=None):
        '''
        Create empty stack machine.
        '''
        self.lexer = lexer or Lexer()
        self.bits = self.lexer.bits
        self.registers = dict()
        self.stack = deque()

    def copy(self, lexer=None):
        '''
        Return an independent machine in the same state.

        Shares this machine's lexer unless given another.
        '''
        other = type(self)(lexer or self.lexer)
        other.registers = dict(self.registers)
        other.stack = deque(self.stack)
        return other

    __copy__ = copy

    def execute(self, operation):
        '''
        Run a single Operation on the machine.

        Never raises for any operation; rejected operations leave the stack
        and registers as they were.
        '''
        try:
            self._apply(self._resolve(operation))
        except RPNError as e:
            if self.lexer.verbose:
                logger.debug('Ignoring %s: %s', operation, e.args[0])

    def eval(self, line):
        '''
        Lex a line and run every operation in it, left to right.

        Returns the machine, for chaining.
        '''
        for operation in self.lexer.operations(line):
            self.execute(operation)
        return self

    def peek(self, default=None):
        '''
        Return the element on the top of the stack, or default if empty.
        '''
        if not self.stack:
            return default
        return self.stack[-1]

    def render(self):
        '''
        Return all elements on the stack, bottom first, each followed by a
        space.
        '''
        return ''.join('{} '.format(value) for value in self.stack)

    __str__ = render

    def arity(self, operation):
        '''
        Return number of stack elements the operation pops.
        '''
        return self._arity(self._resolve(operation))

    def _resolve(self, operation):
        '''
        Bind the function implementing an operation to this machine, and to
        the operation's argument if it has one.
        '''
        f = partial(type(self).OPERATIONS[operation.op], self)
        if operation.argument is not None:
            f = partial(f, operation.argument)
        return f

    def _arity(self, f):
        '''
        Return number of non-default positional arguments.
        '''
        parameters = getsignature(f).parameters.values()
        positionals = [parameter
                       for parameter
                       in parameters
                       if parameter.kind == Parameter.POSITIONAL_OR_KEYWORD and
                          parameter.default == Parameter.empty]
        return len(positionals)

    def _apply(self, f):
        '''
        Apply function to stack, popping arguments as needed.

        Pushes the result, wrapped to the machine's width, unless None.
        '''
        # If you don't reverse, you'll do 2 - 9 when you say 9 2 - instead of
        # 9 - 2.
        args = reversed(self._popstack(self._arity(f)))
        res = f(*args)
        if res is not None:
            self.push(res)

    def _wrap(self, value):
        return wrap(value, self.bits)

    def push(self, *new):
        '''
        Push all elements onto stack, leftmost at the bottom.
        '''
        self.stack.extend(self._wrap(value) for value in new)

    def _popstack(self, n=1):
        '''
        Pop specified number of args from stack, topmost first.

        Pops nothing if there are not enough.
        '''
        if len(self.stack) < n:
            raise StackUnderflow('Less than {} element(s) on stack'.format(n))
        return [self.stack.pop() for _ in range(n)]

    def _drain(self):
        '''
        Pop every element off the stack, bottom first.
        '''
        values = list(self.stack)
        self.stack.clear()
        return values

    def clear(self):
        '''
        Clear everything from the stack.
        '''
        self.stack.clear()

    def load(self, name):
        '''
        Push value of variable.
        '''
        if name not in self.registers:
            raise UnboundVariable('No such variable {}'.format(repr(name)))
        return self.registers[name]

    def store(self, name, value):
        '''
        Pop value into variable, overwriting it.
        '''
        self.registers[name] = value

    def _literal(self, value):
        return value

    def _noop(self):
        pass

    def _add(self, left, right):
        return left + right

    def _sub(self, left, right):
        return left - right

    def _mul(self, left, right):
        return left * right

    def _div(self, left, right):
        '''
        Integer division, truncated towards zero. Division by zero is 0.
        '''
        if not right:
            return 0
        quotient = abs(left) // abs(right)
        if (left < 0) != (right < 0):
            return -quotient
        return quotient

    @restoring
    def _exp(self, base, exponent):
        '''
        Raise to non-negative power, modulo the machine width.
        '''
        if exponent < 0:
            raise DomainError('Negative exponent {}'.format(exponent))
        return pow(base, exponent, 1 << self.bits)

    def _square(self, only):
        return only * only

    def _double(self, only):
        return only * 2

    @restoring
    def _fact(self, only):
        '''
        Product of 1 to n inclusive; 1 for 0.
        '''
        if only < 0:
            raise DomainError('Negative factorial {}'.format(only))
        product = 1
        for n in range(2, only + 1):
            product = self._wrap(product * n)
            # Wrapped to zero, stays zero.
            if not product:
                break
        return product

    def _inv(self, only):
        return -only

    def _sum(self):
        return reduce(lambda acc, value: self._wrap(acc + value),
                      self._drain(),
                      0)

    def _prod(self):
        return reduce(lambda acc, value: self._wrap(acc * value),
                      self._drain(),
                      1)

    def _swap(self, left, right):
        '''
        Swap two elements at top of stack.
        '''
        self.push(right, left)

    # Operation to function translation. Functions take the machine, then
    # the operation's argument if any, then the operands, bottom first.
    OPERATIONS = {
        Op.ADD: _add,
        Op.SUB: _sub,
        Op.MUL: _mul,
        Op.DIV: _div,
        Op.EXP: _exp,
        Op.SQUARE: _square,
        Op.DOUBLE: _double,
        Op.FACT: _fact,
        Op.INV: _inv,
        Op.SUM: _sum,
        Op.PROD: _prod,
        Op.SWAP: _swap,
        Op.CLEAR: clear,
        Op.PUSH: _literal,
        Op.VARINIT: store,
        Op.VARREF: load,
        Op.NOOP: _noop,
    }


def preview(machine, line):
    '''
    Return what the machine would look like after evaluating line.

    Evaluates on a quiet copy; machine itself is left untouched, and
    nothing is logged.
    '''
    return machine.copy(machine.lexer.copy(verbose=False)).eval(line)
