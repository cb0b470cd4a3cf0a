"""Vector math, geometry predicates and path resampling for Tangle."""
