"""Domain layer - models, parsing rules and constants with no I/O"""
