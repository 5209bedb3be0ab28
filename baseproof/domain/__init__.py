"""Domain layer for BaseProof.

Pure models, errors and the proof type registry. Nothing in this
package performs I/O.
"""
