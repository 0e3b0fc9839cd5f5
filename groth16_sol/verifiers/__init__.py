"""
groth16_sol.verifiers

BN254 model and verification:

- `field`          Fr / Fq / Fq2 (+ BabyJubJub scalar field)
- `points`         G1/G2 affine and infinity variants
- `babyjubjub`     twisted Edwards curve over Fr
- `pairing_bn254`  py_ecc wrapper (conversions, group ops, pairing products)
- `precompiles`    ecAdd / ecMul / ecPairing emulation
- `groth16_bn254`  direct verification through the generated assembly
"""
