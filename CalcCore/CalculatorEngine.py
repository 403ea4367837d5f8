# CalculatorEngine.py
"""""
Calculator engine: the facade the front ends talk to.

The engine owns the expression being edited and the cursor position, and
keeps them coherent while terms are added one by one: operators replace
each other, implicit multiplications are glued, a lone 0 is replaced, signs
are toggled... It also owns per-instance registries for the variables
(including 'ans' and 'mem'), the commands and the plugins, and notifies
listeners through events.

Events
------
expression, position, replace, insert, clear, reset, correct, term,
evaluate, result, syntaxerror, error, configure, render,
variableadd, variabledelete, variableclear,
commandadd, commanddelete, commandclear, command, command-<name>,
pluginadd, plugindelete, pluginclear
"""""

import re

from . import config_manager as config_manager
from . import error as E
from . import tokens as H
from . import ExpressionRenderer
from .MathEngine import MathEvaluator
from .terms import terms, is_prefixed_term
from .tokenizer import Tokenizer
from .strategies import (
    apply_change_strategies,
    apply_context_strategies,
    apply_list_strategies,
    apply_value_strategies,
    correct_strategies,
    limit_strategies,
    prefix_strategies,
    replace_expression_strategies,
    replace_operator_strategies,
    sign_strategies,
    suffix_strategies,
    trigger_strategies,
)

# Debug toggle for optional prints in this module
debug = config_manager.load_setting_value("debug") == True

lastResultVariable = terms["VAR_ANS"].value
memoryVariable = terms["VAR_MEM"].value

reSpace = re.compile(r"\s+")

MATHS_SETTINGS = ("degree", "precision", "internal_precision")


class CalculatorEngine:
    """Expression editing engine.

    engine = CalculatorEngine()
    engine.use_terms("NUM3 ADD NUM2")
    engine.evaluate().result  ->  Decimal('5')
    """
    def __init__(self, expression='', position=None, instant=None, corrector=None, limiter=None,
                 variables=None, commands=None, plugins=None, maths=None):
        settings = config_manager.load_settings()

        self.instant = settings["instant"] if instant is None else instant
        self.corrector = settings["corrector"] if corrector is None else corrector
        self.limiter = settings["limiter"] if limiter is None else limiter
        self.decimal_places = settings["decimal_places"]

        self.maths_config = {name: settings[name] for name in MATHS_SETTINGS}
        self.maths_config.update(maths or {})
        self.maths = None

        self.events = {}
        self.variables = {}
        self.commands = {}
        self.plugins = {}
        self.tokenizer = Tokenizer()
        self.tokens = None
        self.state = {
            "changed": False,  # did the expression change since the last evaluation?
            "error": False,    # does the expression hold an error?
        }

        self.expression = ''
        self.position = 0

        self.configure_maths_evaluator()
        self.set_last_result('0')
        self.set_memory()
        self.set_expression(expression)
        self.set_position(len(self.expression) if position is None else position)

        self.set_command('clear', lambda: self.clear())
        self.set_command('reset', lambda: self.reset())
        self.set_command('clearAll', lambda: self.reset())
        self.set_command('execute', lambda: self.execute())
        self.set_command('var', lambda name: self.use_variable(name))
        self.set_command('term', lambda names: self.use_terms(names))
        self.set_command('sign', lambda: self.change_sign())
        self.set_command('degree', lambda: self.set_degree_mode(True))
        self.set_command('radian', lambda: self.set_degree_mode(False))
        self.set_command('remind', lambda: self.use_variable(memoryVariable))
        self.set_command('memorize', lambda: self.set_memory())
        self.set_command('remindStore', lambda: self.set_memory())
        self.set_command('forget', lambda: self.clear_memory())
        self.set_command('remindClear', lambda: self.clear_memory())
        self.set_command('moveLeft', lambda: self.move_position_left())
        self.set_command('moveRight', lambda: self.move_position_right())
        self.set_command('deleteLeft', lambda: self.delete_token_left())
        self.set_command('deleteRight', lambda: self.delete_token_right())

        self.set_command_list(commands or {})
        self.set_variable_list(variables or {})
        self.add_plugin_list(plugins or {})

    # -----------------------------
    # Events
    # -----------------------------

    def on(self, names, listener):
        """Register a listener for one or several space separated events."""
        if isinstance(names, str) and callable(listener):
            for name in reSpace.split(names.strip()):
                listeners = self.events.setdefault(name, [])
                if listener not in listeners:
                    listeners.append(listener)
        return self

    def off(self, names=None, listener=None):
        """Remove a listener, all the listeners of some events, or every listener."""
        if names is None:
            self.events.clear()
            return self

        if isinstance(names, str) and names:
            for name in reSpace.split(names.strip()):
                listeners = self.events.get(name)
                if not listeners:
                    continue
                if listener is not None:
                    if listener in listeners:
                        listeners.remove(listener)
                else:
                    listeners.clear()
        return self

    def trigger(self, name, *args):
        if name not in self.events:
            return self

        for listener in list(self.events[name]):
            listener(*args)
        return self

    # -----------------------------
    # Modes
    # -----------------------------

    def configure_maths_evaluator(self, **config):
        """Reconfigure the evaluator. Unknown settings are reported through the 'error' event and skipped."""
        for name in list(config):
            if name not in MATHS_SETTINGS:
                self.trigger('error', E.ConfigError(E.error_message("5001", name), code="5001"))
                del config[name]

        self.maths_config.update(config)
        self.maths = MathEvaluator(**self.maths_config)
        self.trigger('configure', config)
        return self

    def get_maths_evaluator(self):
        return self.maths

    def get_tokenizer(self):
        return self.tokenizer

    def set_degree_mode(self, degree=True):
        return self.configure_maths_evaluator(degree=degree)

    def is_degree_mode(self):
        return bool(self.maths_config.get("degree"))

    def set_instant_mode(self, mode=True):
        self.instant = mode
        self.trigger('configure', {"instant": mode})
        return self

    def is_instant_mode(self):
        return bool(self.instant)

    def set_corrector_mode(self, mode=True):
        self.corrector = mode
        self.trigger('configure', {"corrector": mode})
        return self

    def is_corrector_mode(self):
        return bool(self.corrector)

    def set_limiter_mode(self, mode=True):
        self.limiter = mode
        self.trigger('configure', {"limiter": mode})
        return self

    def is_limiter_mode(self):
        return bool(self.limiter)

    @property
    def changed(self):
        return self.state["changed"]

    @property
    def error(self):
        return self.state["error"]

    # -----------------------------
    # Expression and position
    # -----------------------------

    def get_expression(self):
        return self.expression

    def set_expression(self, expression):
        self.expression = H.string_value(expression) if expression else ''
        self.tokens = None
        self.state["changed"] = True
        self.state["error"] = False

        self.trigger('expression', self.expression)
        return self

    def get_position(self):
        return self.position

    def set_position(self, position):
        try:
            position = int(position)
        except (TypeError, ValueError):
            position = 0
        self.position = max(0, min(position, len(self.expression)))

        self.trigger('position', self.position)
        return self

    def move_position_left(self):
        """Move the cursor to the start of the previous token."""
        tokens = self.get_tokens()
        index = self.get_token_index()
        token = tokens[index] if index < len(tokens) else None

        if token is not None and self.position > 0:
            if token.offset == self.position:
                token = tokens[index - 1] if index > 0 else None
        else:
            token = None

        offset = token.offset if token is not None else 0
        if offset != self.position:
            self.set_position(offset)
        return self

    def move_position_right(self):
        """Move the cursor to the start of the next token, or to the end."""
        tokens = self.get_tokens()
        index = self.get_token_index()
        offset = len(self.expression)

        if index < len(tokens) - 1:
            offset = tokens[index + 1].offset

        if offset != self.position:
            self.set_position(offset)
        return self

    def get_tokens(self):
        """Tokens of the expression, kept until the next change of the expression."""
        if self.tokens is None:
            self.tokens = self.tokenizer.tokenize(self.expression)
        return self.tokens

    def get_token(self):
        tokens = self.get_tokens()
        index = self.get_token_index()
        if index < len(tokens):
            return tokens[index]
        return None

    def get_token_index(self):
        """Index of the last token starting at or before the cursor."""
        index = 0
        for idx, token in enumerate(self.get_tokens()):
            if self.position >= token.offset:
                index = idx
        return index

    def _delete_span(self, start, end):
        to = end
        while to < len(self.expression) and self.expression[to] == ' ':
            to += 1

        position = self.position
        self.set_expression(self.expression[:start] + self.expression[to:])
        if position > to:
            self.set_position(position + start - to)
        elif position > start:
            self.set_position(start)

    def delete_token(self, token):
        """Remove a token and the spaces after it."""
        if token is None:
            return self
        self._delete_span(token.offset, token.offset + len(token.value))
        return self

    def delete_token_range(self, start, end):
        """Remove the tokens from start to end (included) and the spaces after them."""
        if start is None or end is None:
            return self
        self._delete_span(start.offset, end.offset + len(end.value))
        return self

    def delete_token_left(self):
        tokens = self.get_tokens()
        index = self.get_token_index()
        if not tokens:
            return self

        token = tokens[index]
        if self.position > token.offset:
            self.delete_token(token)
        elif index > 0:
            self.delete_token(tokens[index - 1])
        elif self.position > 0:
            self.delete_token(tokens[0])
        return self

    def delete_token_right(self):
        tokens = self.get_tokens()
        index = self.get_token_index()
        if not tokens:
            return self

        token = tokens[index]
        if self.position >= token.offset + len(token.value):
            self.delete_token(tokens[index + 1] if index + 1 < len(tokens) else None)
        else:
            self.delete_token(token)
        return self

    def change_sign(self):
        """Toggle the sign of the operand at the cursor."""
        if self.expression.strip() == terms["NUM0"].value:
            return self

        change = apply_change_strategies(self.get_token_index(), self.get_tokens(), sign_strategies)
        if change:
            offset = change["offset"]
            expression = self.expression[:offset] + change["value"] + \
                self.expression[offset + change["length"]:]
            self.replace(expression, self.position + change["move"])
        return self

    # -----------------------------
    # Variables
    # -----------------------------

    def has_variable(self, name):
        return name in self.variables

    def get_variable(self, name):
        return self.variables.get(name)

    def get_variable_value(self, name):
        variable = self.variables.get(name)
        if variable is None:
            return 0
        return variable.result

    def set_variable(self, name, value):
        """Evaluate and store a variable, a failing expression stores 0 but keeps its text."""
        try:
            value = self.maths(value)
        except E.MathError as e:
            if debug == True:
                print(f"Variable {name} falls back to 0: {e}")
            expression = getattr(value, "expression", value)
            value = self.maths('0')
            value.expression = expression

        self.variables[name] = value
        self.trigger('variableadd', name, value)
        return self

    def delete_variable(self, name):
        self.variables.pop(name, None)
        self.trigger('variabledelete', name)
        return self

    def get_all_variables(self):
        return dict(self.variables)

    def get_all_variable_values(self):
        return {name: value.result for name, value in self.variables.items()}

    def set_variable_list(self, variables):
        for name, value in variables.items():
            self.set_variable(name, value)
        return self

    def clear_variables(self):
        self.variables.clear()
        self.trigger('variableclear')

        self.set_last_result('0')
        self.clear_memory()
        return self

    def set_last_result(self, result):
        """Store the last result, errors and empty results become 0."""
        if result is None or result == '' or ExpressionRenderer.contains_error(result):
            result = '0'
        return self.set_variable(lastResultVariable, result)

    def get_last_result(self):
        return self.get_variable(lastResultVariable)

    def set_memory(self):
        return self.set_variable(memoryVariable, self.get_last_result())

    def get_memory(self):
        return self.get_variable(memoryVariable)

    def clear_memory(self):
        return self.set_variable(memoryVariable, '0')

    # -----------------------------
    # Commands
    # -----------------------------

    def has_command(self, name):
        return name in self.commands

    def get_command(self, name):
        return self.commands.get(name)

    def set_command(self, name, action):
        self.commands[name] = action
        self.trigger('commandadd', name)
        return self

    def delete_command(self, name):
        self.commands.pop(name, None)
        self.trigger('commanddelete', name)
        return self

    def get_all_commands(self):
        return dict(self.commands)

    def set_command_list(self, commands):
        for name, action in commands.items():
            self.set_command(name, action)
        return self

    def clear_commands(self):
        self.commands.clear()
        self.trigger('commandclear')
        return self

    def invoke(self, name, *args):
        """Run a command. Unknown commands are reported through the 'error' event."""
        action = self.commands.get(name)
        if not callable(action):
            self.trigger('error', E.CommandError(E.error_message("6003", name), code="6003"))
            return False

        self.trigger(f'command-{name}', *args)
        self.trigger('command', name, *args)

        action(*args)
        return True

    # -----------------------------
    # Plugins
    # -----------------------------

    def has_plugin(self, name):
        return name in self.plugins

    def add_plugin(self, name, install):
        """Install a plugin, install(engine) may return the function uninstalling it."""
        if self.has_plugin(name):
            self.remove_plugin(name)

        self.plugins[name] = install(self) or True
        self.trigger('pluginadd', name)
        return self

    def remove_plugin(self, name):
        uninstall = self.plugins.pop(name, None)
        if callable(uninstall):
            uninstall()

        self.trigger('plugindelete', name)
        return self

    def add_plugin_list(self, plugins):
        for name, install in plugins.items():
            self.add_plugin(name, install)
        return self

    def clear_plugins(self):
        for uninstall in self.plugins.values():
            if callable(uninstall):
                uninstall()
        self.plugins.clear()

        self.trigger('pluginclear')
        return self

    # -----------------------------
    # Terms
    # -----------------------------

    def add_term(self, name, term):
        """Add a term at the cursor, keeping the expression coherent.

        Returns False when the term is invalid or rejected.
        """
        if term is None or getattr(term, "value", None) is None:
            self.trigger('error', E.TermError(E.error_message("6001", name), code="6001"))
            return False

        # an evaluated expression is continued from its result, unless an operator follows
        if self.instant and not self.changed and not self.error and not H.is_binary_operator(term):
            self.replace(lastResultVariable)

        tokens = self.get_tokens()
        index = self.get_token_index()
        current_token = tokens[index] if index < len(tokens) else None
        new_tokens = tokens[:index + 1] + [term]

        # reject the terms that would break the expression
        if self.limiter and apply_context_strategies(new_tokens, limit_strategies):
            if debug == True:
                print(f"Term {name} rejected at {self.position}")
            return False

        if apply_context_strategies(new_tokens, replace_expression_strategies):
            self.replace(term.value)
        else:
            to_remove = apply_context_strategies(new_tokens, replace_operator_strategies)
            if to_remove:
                self.delete_token_range(tokens[index - to_remove + 1], current_token)
                tokens = self.get_tokens()
                index = self.get_token_index()
                current_token = tokens[index] if index < len(tokens) else None
                new_tokens = tokens[:index + 1] + [term]

            previous_token = tokens[index - 1] if index > 0 else None
            next_token = current_token
            value = term.value
            at = self.position

            # insert at a token boundary
            if current_token is not None and at > current_token.offset:
                at = current_token.offset + len(current_token.text)
                previous_token = current_token
                next_token = tokens[index + 1] if index + 1 < len(tokens) else None

            # a dot starting a number
            if name == 'DOT' and not H.is_digit(previous_token):
                value = terms["NUM0"].value + value

            # glue the term to its neighbours
            if self.expression:
                if previous_token is not None:
                    value = apply_value_strategies(value, previous_token, term, prefix_strategies)
                if next_token is not None:
                    value = apply_value_strategies(value, term, next_token, suffix_strategies)

            # no double spaces
            if value.startswith(' ') and at > 0 and self.expression[at - 1] == ' ':
                value = value.lstrip(' ')
            if value.endswith(' ') and at < len(self.expression) and self.expression[at] == ' ':
                value = value.rstrip(' ')

            # a glued multiplication is the operator that may trigger the evaluation
            if value.startswith(terms["MUL"].value):
                new_tokens = tokens[:index + 1] + [terms["MUL"]]
            if self.instant and apply_context_strategies(new_tokens, trigger_strategies):
                if self.changed:
                    self.evaluate()
                self.replace(lastResultVariable)
                at = self.position

            self.insert(value, at)

        self.trigger('term', name, term)
        return True

    def use_term(self, name):
        """Add a registered term by identifier, '@NAME' adds a function as an operator."""
        prefixed = is_prefixed_term(name)
        if prefixed:
            name = name[1:]

        term = terms.get(name)
        if term is None:
            self.trigger('error', E.TermError(E.error_message("6001", name), code="6001"))
            return False

        if prefixed:
            term = term.copy(value=f"@{term.value}")

        return self.add_term(name, term)

    insert_term = use_term

    def use_terms(self, names):
        """Add a list of terms, or a space separated string of identifiers. Stops at the first failure."""
        if isinstance(names, str):
            names = reSpace.split(names.strip())
        return all(self.use_term(name) for name in names)

    insert_term_list = use_terms

    def use_variable(self, name):
        if not self.has_variable(name):
            self.trigger('error', E.VariableError(E.error_message("6002", name), code="6002"))
            return False

        token = f"VAR_{name.upper()}"
        term = terms.get(token)
        if term is None:
            term = terms["VAR_ANS"].copy(token=token, label=name, value=name)
        return self.add_term(token, term)

    insert_variable = use_variable

    # -----------------------------
    # Editing
    # -----------------------------

    def replace(self, expression, position=None):
        """Replace the whole expression, the cursor goes to the end unless told otherwise."""
        old_expression = self.expression
        old_position = self.position

        self.set_expression(expression)
        self.set_position(len(self.expression) if position is None else position)

        self.trigger('replace', old_expression, old_position)
        return self

    def insert(self, sub_expression, at=None):
        """Insert text at a position (the cursor by default), the cursor moves after it."""
        old_expression = self.expression
        old_position = self.position

        if not isinstance(at, int):
            at = self.position
        at = max(0, min(at, len(self.expression)))

        self.set_expression(self.expression[:at] + sub_expression + self.expression[at:])
        self.set_position(at + len(sub_expression))

        self.trigger('insert', old_expression, old_position)
        return self

    def clear(self):
        self.set_expression('').set_position(0)
        self.trigger('clear')
        return self

    def reset(self):
        self.clear_variables()
        self.clear()
        self.trigger('reset')
        return self

    def correct(self):
        """Remove the dangling operators and close the open parenthesis."""
        corrected = apply_list_strategies(self.get_tokens(), correct_strategies)
        expression = ExpressionRenderer.build(corrected)

        if expression != self.expression:
            self.replace(expression)
            self.trigger('correct')
        return self

    def execute(self):
        if self.corrector:
            self.correct()
        return self.evaluate()

    def evaluate(self):
        """Evaluate the expression.

        Returns the MathResult, or None when the expression is invalid
        (reported through the 'syntaxerror' event).
        """
        result = None
        self.state["changed"] = False

        try:
            tokens = self.get_tokens()
            if len(tokens) == 1 and not H.is_value(tokens[0]):
                raise E.SyntaxError(E.error_message("3012", self.expression), code="3012", equation=self.expression)

            if self.expression.strip():
                result = self.maths(self.expression, self.get_all_variable_values())
            else:
                result = self.maths('0')

            self.state["error"] = ExpressionRenderer.contains_error(result)

            self.trigger('evaluate', result)

            if not self.state["error"]:
                self.set_last_result(result)

            self.trigger('result', result)

        except E.MathError as e:
            if debug == True:
                print(f"Evaluation failed: {e.code} {e.message}")
            self.state["error"] = True
            self.trigger('syntaxerror', e)
            return None

        return result

    def render(self, decimals=None):
        """Render the expression, the variables are rounded to a number of decimals."""
        if decimals is None:
            decimals = self.decimal_places
        variables = ExpressionRenderer.round_all_variables(self.get_all_variables(), decimals)
        rendered = ExpressionRenderer.render(self.get_tokens(), variables, self.tokenizer)

        self.trigger('render', rendered)
        return rendered
