"""
Discord-facing layer of the Doorknob bot: commands, event handlers and the
bot core.
"""
