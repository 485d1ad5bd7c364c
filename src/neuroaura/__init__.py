"""NeuroAura: explainable stress scoring from self-report and typing signals."""

__version__ = "0.1.0"
