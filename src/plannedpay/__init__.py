"""Planned and recurring payment tracker."""

__version__ = "0.1.0"


def __getattr__(name):
    # The CLI pulls in every layer, so it is only imported on demand
    if name == "main":
        from plannedpay.cli.main import main

        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
