from os import isatty
from sys import stdin, stdout, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.application.current import get_app
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import FormattedText

from .lexer import Lexer
from .machine import Machine, preview
from .util import DEFAULT_BITS


logger = logging.getLogger(__name__)


class PreviewCompleter(Completer):
    '''
    Complete keywords and bound variable references.

    Each completion shows what the stack would be if it were accepted.
    '''

    def __init__(self, machine):
        self.machine = machine

    def candidates(self):
        yield from Lexer.KEYWORDS
        for name in sorted(self.machine.registers):
            yield '$' + name

    def get_completions(self, document, complete_event):
        word = document.get_word_before_cursor(WORD=True)
        before = document.text_before_cursor[:len(document.text_before_cursor)
                                             - len(word)]
        for candidate in self.candidates():
            if candidate.startswith(word):
                snapshot = preview(self.machine, before + candidate)
                yield Completion(candidate,
                                 start_position=-len(word),
                                 display_meta=snapshot.render())


class InteractiveInput:
    def __init__(self, prompt, machine):
        self.prompt = prompt
        self.machine = machine

    def _preview(self):
        '''
        Stack as it would be if the line being typed were submitted.
        '''
        text = get_app().current_buffer.text
        return FormattedText([('ansiyellow',
                               preview(self.machine, text).render())])

    def _depth(self):
        return '[{}]'.format(len(self.machine.stack))

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    # In memory only
                                    history=None,
                                    completer=PreviewCompleter(self.machine),
                                    complete_while_typing=False,
                                    rprompt=self._depth,
                                    bottom_toolbar=self._preview,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Debatable. Interferes with X11 selection.
                                    mouse_support=True,
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to integer RPN system.
    '''

    DEFAULT_PROMPT = '>> '
    BITS = 8, 16, 32, 64, 128

    def dumper(self):
        '''
        Dump every token, its operation, and arity.
        '''
        print('[operation]\t<repr(token)>\t<arity>')
        for line in self.args.expressions:
            for token in self.lexer.lex(line):
                operation = self.lexer.classify(token)
                print(operation,
                      repr(token),
                      self.machine.arity(operation),
                      sep='\t')

    def executor(self):
        '''
        Run machine (RPN calculator), showing it after every line.
        '''
        for line in self.args.expressions:
            self.machine.eval(line)
            self.show()

    def show(self):
        '''
        Print top of stack (0 if empty), or the whole stack if asked.
        '''
        if self.args.stack:
            text = self.machine.render()
        else:
            text = str(self.machine.peek(default=0))
        if self._interactive():
            print_formatted_text(FormattedText([('', '= '),
                                                ('ansigreen', text)]))
        else:
            print(text)

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        for name, pattern in self.lexer.grammar():
            print(name, pattern.strip(), sep='\t')

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    machine=self.machine)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(
            description='Integer RPN calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='log ignored operations')
        self.argument_parser.add_argument('-s', '--stack',
                                          action='store_true',
                                          help='show whole stack')
        self.argument_parser.add_argument('-b', '--bits',
                                          type=int,
                                          choices=self.BITS,
                                          default=DEFAULT_BITS,
                                          help='integer width')
        self.argument_parser.add_argument('--loose',
                                          action='store_true',
                                          help='find variables inside tokens')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def _interactive(self):
        return isinstance(self.args.expressions, InteractiveInput)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=logging.DEBUG if self.args.verbose
                            else logging.WARNING,
                            format='%(name)s: %(message)s')
        self.lexer = Lexer(strict=not self.args.loose, bits=self.args.bits)
        self.machine = Machine(self.lexer)
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        logger.debug('%d bit integers, %s variable tokens', self.args.bits,
                     'loose' if self.args.loose else 'strict')
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)
