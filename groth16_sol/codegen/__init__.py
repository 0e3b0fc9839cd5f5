"""
groth16_sol.codegen

Verification key -> Solidity: `transform` (negated/split key constants),
`ir` (assembly ops + interpreter), `msm` and `pairing` (fragment assemblers),
`render` (source text).
"""
