"""
Registry kernel: models, entity store, reconciler, resolver and the access
facade in front of them.
"""
