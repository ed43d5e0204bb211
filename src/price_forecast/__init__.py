"""
Dual-Model Price Forecast

Trains an LSTM and a CNN sequence regressor on a closing-price series and merges
their autoregressive forecasts into one ensemble.
"""

__version__ = "0.1.0"
__author__ = "Mabunda Hlulani"
__email__ = "213067605@tut4life.ac.za"
