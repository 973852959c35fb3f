"""SPHINCS+-SHAKE-256f-simple stateless hash-based signatures and their building blocks."""