"""
Scoring model, trainer and shared model registry.

Modules
-------
weights   : ModelWeights + clamp ranges of the trainable coefficients.
scoring   : Pure sub-score functions, sigmoid and predict().
trainer   : train() batch weight update + TrainingSummary.
explain   : predict_detailed(): display factors, recommendation, advice.
model     : BiteModel: weights, hyperparameters, sample history.
registry  : ReadWriteLock + ModelRegistry for concurrent access.
"""
