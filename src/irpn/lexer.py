from functools import reduce
import logging
import operator

import regex

from .operation import Op, Operation, NOOP
from .util import DEFAULT_BITS, fits


logger = logging.getLogger(__name__)


class Lexer:
    '''
    Lexer for the integer RPN grammar.

    Splits lines into whitespace separated tokens and classifies each token
    into exactly one Operation. Never fails: anything it does not recognise
    is a no-op.

    :param strict: Require variable tokens to be the whole token (``=foo``,
                   ``$foo``). When false, the pattern may appear anywhere in
                   the token, so ``x=foo`` assigns ``foo``.
    :param bits: Integer width. Literals that do not fit are not numbers.
    :param verbose: Log tokens that look like integers but do not fit. The
                    machine also logs ignored operations only when set.
    '''
    # Fixed operators and keywords, matched exactly, before anything else.
    KEYWORDS = {
        '+': Op.ADD,
        '-': Op.SUB,
        '*': Op.MUL,
        '/': Op.DIV,
        '^': Op.EXP,
        # Doubled operators are their unary shorthand
        '**': Op.DOUBLE,
        '^^': Op.SQUARE,
        '!': Op.FACT,
        'inv': Op.INV,
        'swap': Op.SWAP,
        'c': Op.CLEAR,
        'sum': Op.SUM,
        'prod': Op.PROD,
    }
    # Variable name
    IDENTIFIER = r'''
                 # One ASCII letter, then ASCII letters or digits.
                 [a-zA-Z]
                 [a-zA-Z0-9]*
                 '''
    # Assignment, e.g., =foo
    VARINIT = r'=(?<name>' + IDENTIFIER + r')'
    # Reference, e.g., $foo
    VARREF = r'\$(?<name>' + IDENTIFIER + r')'
    # Base 10 signed integer. Bounds checked after the match, not in here.
    INTEGER = r'''
              -?
              [0-9]+
              '''
    # Default regex flags for matching tokens
    FLAGS = reduce(operator.__or__,
                   {regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def __init__(self, strict=True, bits=DEFAULT_BITS, verbose=True):
        self.strict = strict
        self.bits = bits
        self.verbose = verbose

    def copy(self, **changes):
        '''
        Return a lexer with the same settings, except those given.
        '''
        settings = dict(strict=self.strict,
                        bits=self.bits,
                        verbose=self.verbose)
        settings.update(changes)
        return type(self)(**settings)

    def lex(self, line):
        '''
        Take a line and yield all tokens, left to right.
        '''
        yield from line.split()

    def classify(self, token):
        '''
        Return the Operation for a single token.

        First match wins: keywords, assignment, reference, integer.
        '''
        op = type(self).KEYWORDS.get(token)
        if op is not None:
            return Operation(op)
        for op, pattern in [(Op.VARINIT, type(self).VARINIT),
                            (Op.VARREF, type(self).VARREF)]:
            match = self._match(pattern, token)
            if match is not None:
                return Operation(op, match.group('name'))
        if regex.fullmatch(type(self).INTEGER, token, flags=type(self).FLAGS):
            # A bits wide integer has fewer than bits decimal digits.
            digits = token.lstrip('-').lstrip('0')
            if len(digits) <= self.bits:
                value = int(token)
                if fits(value, self.bits):
                    return Operation(Op.PUSH, value)
            if self.verbose:
                logger.debug('%.20s does not fit in %d bits', token, self.bits)
        return NOOP

    def operations(self, line):
        '''
        Yield the Operation of every token of a line, in order.
        '''
        for token in self.lex(line):
            yield self.classify(token)

    def grammar(self):
        '''
        Return the patterns recognised, by name, in classification order.

        Patterns come back on one line each, without their comments.
        '''
        return [
            ('keyword', ' '.join(type(self).KEYWORDS)),
            ('varinit', self._compact(type(self).VARINIT)),
            ('varref', self._compact(type(self).VARREF)),
            ('integer', self._compact(type(self).INTEGER)),
        ]

    def _compact(self, pattern):
        # None of the patterns match whitespace or a literal #.
        return regex.sub(r'\#[^\n]*|\s+', '', pattern)

    def _match(self, pattern, token):
        if self.strict:
            return regex.fullmatch(pattern, token, flags=type(self).FLAGS)
        return regex.search(pattern, token, flags=type(self).FLAGS)
