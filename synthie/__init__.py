"""Score-driven software synthesizer with effects and WAVE file input and output."""

__version__ = "0.1.0"