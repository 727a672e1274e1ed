"""
Latent-factor recommender training core.

Modules are grouped into the optimisation-control core, rating data helpers,
concrete SGD factorisation models, and pipelines that wire them together.
"""
