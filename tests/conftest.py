from pytest import fixture

from irpn.lexer import Lexer
from irpn.machine import Machine


@fixture
def lexer():
    return Lexer()


@fixture
def loose_lexer():
    '''
    Lexer matching variable tokens anywhere, like =foo in x=foo.
    '''
    return Lexer(strict=False)


@fixture
def machine(lexer):
    return Machine(lexer)


@fixture
def byte_machine():
    '''
    Machine on 8 bit integers, to overflow without huge literals.
    '''
    return Machine(Lexer(bits=8))
