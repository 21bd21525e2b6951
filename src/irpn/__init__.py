'''
Integer RPN calculator.

A stack of fixed-width signed integers, named variables, and a handful of
operators. Every token does something or nothing; no input ever stops the
session.

    $ irpn -e '3 =x $x $x *'
    9

Operators: + - * / ^ (power), ** (double), ^^ (square), ! (factorial),
inv (negate), swap, c (clear), sum and prod (of the whole stack).
=name pops into a variable, $name pushes it back.
'''

from .cli import CLI
from .lexer import Lexer
from .machine import Machine, preview
from .operation import Op, Operation


__all__ = 'Machine', 'Lexer', 'CLI', 'Op', 'Operation', 'preview'
