"""
Optimization-level classifier: vocabulary encoding and the torch LSTM.
"""
