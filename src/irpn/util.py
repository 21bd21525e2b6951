from functools import wraps


DEFAULT_BITS = 64


class RPNError(Exception):
    pass


class StackUnderflow(RPNError):
    pass


class DomainError(RPNError):
    pass


class UnboundVariable(RPNError):
    pass


def wrap(value, bits=DEFAULT_BITS):
    '''
    Wrap integer into signed two's complement range of given width.
    '''
    half = 1 << (bits - 1)
    return (value + half) % (half << 1) - half


def fits(value, bits=DEFAULT_BITS):
    '''
    Return True if integer is representable in given width, without wrapping.
    '''
    half = 1 << (bits - 1)
    return -half <= value < half


def restoring(f):
    '''
    Decorator for machine functions: put the operands back before a raised
    RPNError propagates, so that rejected operations leave no trace.
    '''
    @wraps(f)
    def wrapper(machine, *args):
        try:
            return f(machine, *args)
        except RPNError:
            machine.push(*args)
            raise
    return wrapper
