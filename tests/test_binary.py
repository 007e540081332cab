# tests/test_binary.py
#
# ============================================================
# UNIT TESTS: Basis state encoding
# ============================================================
#
# Site i lives at bit (Ns - 1 - i): site 0 is the most significant bit.
# Every test below pins that convention, because the models' matrix build
# and local energy stencil both depend on it.
#
# ============================================================

import sys
import os
import unittest
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from spinham.binary import (
    base_to_int, binary_powers, check_bit, check_bit_vec, flip, flip_vec,
    format_ket, int_to_base, site_bit, spin_array, spin_at, spins_to_state,
    state_to_spins, to_bits,
)


class TestIntegerEncoding(unittest.TestCase):

    def test_binary_powers(self):
        np.testing.assert_array_equal(binary_powers(4), [1, 2, 4, 8])

    def test_site_zero_is_most_significant_bit(self):
        """|1000> (site 0 up, the rest down) is the integer 8 for Ns=4."""
        self.assertEqual(site_bit(0, 4), 3)
        self.assertTrue(check_bit(8, site_bit(0, 4)))
        self.assertEqual(spin_at(8, 0, 4), 1.0)
        self.assertEqual(spin_at(8, 3, 4), -1.0)

    def test_spin_at_0101(self):
        # 5 = 0101 -> sites 1 and 3 up
        self.assertEqual([spin_at(5, i, 4) for i in range(4)], [-1.0, 1.0, -1.0, 1.0])

    def test_flip_single_site(self):
        # flipping site 0 of 0101 gives 1101 = 13
        self.assertEqual(flip(5, site_bit(0, 4)), 13)
        # flipping twice is the identity
        self.assertEqual(flip(flip(5, 2), 2), 5)

    def test_flip_on_arrays(self):
        states = np.arange(4, dtype=np.int64)
        np.testing.assert_array_equal(flip(states, 0), [1, 0, 3, 2])

    def test_spin_array_matches_spin_at(self):
        ns = 3
        states = np.arange(2 ** ns, dtype=np.int64)
        for site in range(ns):
            expected = [spin_at(int(s), site, ns) for s in states]
            np.testing.assert_array_equal(spin_array(states, site, ns), expected)


class TestVectorEncoding(unittest.TestCase):

    def test_int_to_base(self):
        np.testing.assert_array_equal(int_to_base(5, 4), [0, 1, 0, 1])
        np.testing.assert_array_equal(int_to_base(0, 3), [0, 0, 0])

    def test_base_to_int_accepts_bits_and_spins(self):
        self.assertEqual(base_to_int([0, 1, 0, 1]), 5)
        self.assertEqual(base_to_int([-1, 1, -1, 1]), 5)
        self.assertEqual(base_to_int([]), 0)

    def test_vector_integer_inverse_for_all_states(self):
        ns = 5
        for state in range(2 ** ns):
            self.assertEqual(base_to_int(int_to_base(state, ns)), state)
            self.assertEqual(spins_to_state(state_to_spins(state, ns)), state)

    def test_state_to_spins(self):
        np.testing.assert_array_equal(state_to_spins(6, 3), [1, 1, -1])

    def test_flip_vec_returns_copy(self):
        bits = to_bits([1, -1, -1])
        flipped = flip_vec(bits, 1)
        np.testing.assert_array_equal(flipped, [1, 1, 0])
        np.testing.assert_array_equal(bits, [1, 0, 0])

    def test_flip_vec_agrees_with_flip(self):
        ns = 4
        for state in range(2 ** ns):
            for site in range(ns):
                self.assertEqual(
                    base_to_int(flip_vec(int_to_base(state, ns), site)),
                    flip(state, site_bit(site, ns)),
                )

    def test_check_bit_vec(self):
        self.assertTrue(check_bit_vec([0, 1], 1))
        self.assertFalse(check_bit_vec([-1, 1], 0))

    def test_format_ket(self):
        self.assertEqual(format_ket(6, 4), "0110")


if __name__ == '__main__':
    unittest.main(verbosity=2)
