"""Regenerate the Cayley table for PGA(2,0,1) and report discrepancies.

Compares the hard-coded CAYLEY_TABLE against blade multiplication, then
lists, per output slot, where the transcribed formula differs from it.
"""
from collections import Counter

from pga2d.core.constants import SLOT_NAMES
from pga2d.pga.cayley import CAYLEY_TABLE, TRANSCRIBED_TABLE, derive_products

LEFT_LETTERS = "abcdefgh"
RIGHT_LETTERS = "ijklmnop"

derived = derive_products()
signs, indices = CAYLEY_TABLE.to_matrix()

errors = []
for i, j, sign, k in derived:
    old_sign = int(signs[i, j].item())
    old_idx = int(indices[i, j].item())
    if old_sign != sign or (sign != 0 and old_idx != k):
        errors.append((i, j, old_sign, old_idx, sign, k))

print(f"Found {len(errors)} discrepancies in CAYLEY_TABLE:")
for i, j, old_s, old_idx, new_s, new_idx in errors:
    print(f"  ({i}, {j}): {SLOT_NAMES[i]} * {SLOT_NAMES[j]}")
    print(f"    OLD: sign={old_s}, idx={old_idx}")
    print(f"    NEW: sign={new_s}, idx={new_idx}")


def _term_counts(table, out):
    return Counter((t.sign, t.left, t.right) for t in table.terms_for(out))


def _fmt(term):
    sign, left, right = term
    return f"{'+' if sign > 0 else '-'}{LEFT_LETTERS[left]}*{RIGHT_LETTERS[right]}"


print("\nTranscribed formula vs Cayley table:")
for out, name in enumerate(SLOT_NAMES):
    expected = _term_counts(CAYLEY_TABLE, out)
    actual = _term_counts(TRANSCRIBED_TABLE, out)
    missing = expected - actual
    extra = actual - expected
    if not missing and not extra:
        print(f"  {name:5s} ok")
        continue
    print(f"  {name:5s} missing: {' '.join(_fmt(t) for t in sorted(missing.elements())) or '-'}")
    print(f"  {'':5s} extra:   {' '.join(_fmt(t) for t in sorted(extra.elements())) or '-'}")

# Print the products list in the layout used by cayley._build_cayley_table
print("\n\n# Products list for cayley.py:")
print("products = [")
for i in range(len(SLOT_NAMES)):
    row = [f"({a}, {b}, {s}, {k})" for a, b, s, k in derived if a == i]
    for start in range(0, len(row), 4):
        print("    " + ", ".join(row[start:start + 4]) + ",")
print("]")
