# Puts the repository root on sys.path so the tests import product_ranking without an install.
