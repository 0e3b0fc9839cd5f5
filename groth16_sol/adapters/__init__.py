"""
groth16_sol.adapters

JSON-facing helpers: the decimal-string codec (`decimal_codec`) and the
circom/snarkjs artifact loader (`circom_loader`).
"""
