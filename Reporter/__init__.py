from Reporter.Reporter import Reporter, console

__all__ = ["Reporter", "console"]
