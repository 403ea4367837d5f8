# history.py
"""""
History plugin for the calculator engine.

Every evaluated expression is memorized together with the variables it was
evaluated with. The commands 'historyUp' and 'historyDown' browse the list,
the expression being edited is kept aside and restored when coming back to
the end of the history. 'historyClear' forgets everything, as does a reset.

    engine.add_plugin('history', history_plugin)
"""""


def history_plugin(calculator):
    """Install the history commands, return the function uninstalling them."""
    state = {"history": [], "cursor": 0, "current": None}

    def get_current_state():
        return {
            "expression": calculator.get_expression(),
            "variables": calculator.get_all_variables(),
            "current": None,
        }

    def reset():
        state["current"] = get_current_state()
        state["history"] = []
        state["cursor"] = 0

    def get_memory_at(position):
        history = state["history"]
        if 0 <= position < len(history):
            return history[position]
        elif position == len(history):
            return state["current"]
        return None

    def remind(position):
        history = state["history"]
        cursor = state["cursor"]

        # keep the edited expression, to come back to it later
        if cursor == len(history):
            if position != cursor:
                state["current"] = get_current_state()
        else:
            history[cursor]["current"] = calculator.get_expression()

        memory = get_memory_at(position)
        if memory:
            state["cursor"] = position

            if memory["variables"]:
                calculator.set_variable_list(memory["variables"])

            calculator.replace(memory["current"] or memory["expression"])
            memory["current"] = None

    def push(result):
        history = state["history"]
        last = get_memory_at(len(history) - 1)
        memory = get_memory_at(state["cursor"])

        if not last or calculator.get_expression() != last["expression"]:
            history.append(get_current_state())

        if memory:
            memory["current"] = None

        state["cursor"] = len(history)

    def uninstall():
        calculator \
            .delete_command('historyClear') \
            .delete_command('historyUp') \
            .delete_command('historyDown') \
            .off('evaluate', push) \
            .off('reset', reset)

    calculator \
        .set_command('historyClear', reset) \
        .set_command('historyUp', lambda: remind(state["cursor"] - 1)) \
        .set_command('historyDown', lambda: remind(state["cursor"] + 1)) \
        .on('evaluate', push) \
        .on('reset', reset)

    reset()
    return uninstall
