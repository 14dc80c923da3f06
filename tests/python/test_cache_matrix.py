import threading
import unittest
import warnings

import numpy as np

import cachematrix
from cachematrix import CacheMatrix, CacheMatrixCacheWarning


class TestCacheMatrixAccessors(unittest.TestCase):
    def setUp(self):
        self.a = [[2.0, 3.0], [2.0, 2.0]]
        self.e = [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [-4.0, 0.0, 1.0]]

    def test_get_matrix_returns_constructed_value(self):
        m = CacheMatrix(self.a)
        np.testing.assert_array_equal(m.get_matrix(), np.array(self.a))
        self.assertEqual(m.shape, (2, 2))
        self.assertEqual(m.rows(), 2)
        self.assertEqual(m.cols(), 2)

    def test_new_instance_has_no_inverse(self):
        m = CacheMatrix(self.a)
        self.assertIsNone(m.get_inverse())
        self.assertFalse(m.is_cached)
        self.assertEqual(m.epoch, 0)

    def test_set_matrix_replaces_value_and_clears_inverse(self):
        m = CacheMatrix(self.a)
        m.set_inverse(np.eye(2))
        self.assertTrue(m.is_cached)

        m.set_matrix(self.e)
        np.testing.assert_array_equal(m.get_matrix(), np.array(self.e))
        self.assertIsNone(m.get_inverse())
        self.assertEqual(m.epoch, 1)

    def test_set_matrix_with_equal_value_still_clears_inverse(self):
        m = CacheMatrix(self.a)
        m.set_inverse([[-1.0, 1.5], [1.0, -1.0]])
        m.set_matrix(self.a)
        self.assertIsNone(m.get_inverse())

    def test_default_matrix_is_square_1x1(self):
        m = CacheMatrix()
        self.assertEqual(m.shape, (1, 1))
        np.testing.assert_array_equal(m.get_matrix(), np.array([[1.0]]))

    def test_make_cache_matrix_factory(self):
        m = cachematrix.make_cache_matrix(self.e)
        self.assertIsInstance(m, CacheMatrix)
        np.testing.assert_array_equal(m.get_matrix(), np.array(self.e))

    def test_non_square_matrix_accepted_at_construction(self):
        m = CacheMatrix([[2, 3, 1], [2, 2, 2]])
        self.assertEqual(m.shape, (2, 3))

    def test_integer_input_stored_as_float(self):
        m = CacheMatrix([[2, 3], [2, 2]])
        self.assertEqual(m.dtype, np.dtype("float64"))

    def test_explicit_dtype_is_kept_across_set_matrix(self):
        m = CacheMatrix(self.a, dtype="float32")
        self.assertEqual(m.dtype, np.dtype("float32"))
        m.set_matrix(self.e)
        self.assertEqual(m.dtype, np.dtype("float32"))

    def test_complex_input_stays_complex(self):
        m = CacheMatrix([[1 + 1j, 0], [0, 1]])
        self.assertEqual(m.dtype, np.dtype("complex128"))

    def test_scalar_input_is_1x1(self):
        m = CacheMatrix(5)
        self.assertEqual(m.shape, (1, 1))

    def test_empty_matrix_accepted_at_construction(self):
        m = CacheMatrix(np.zeros((0, 0)))
        self.assertEqual(m.shape, (0, 0))
        self.assertIsNone(m.get_inverse())
        m.set_matrix(np.zeros((0, 0)))
        self.assertEqual(m.epoch, 1)

    def test_clear_inverse(self):
        m = CacheMatrix(self.a)
        m.set_inverse(np.eye(2))
        m.clear_inverse()
        self.assertIsNone(m.get_inverse())
        self.assertEqual(m.epoch, 0)


class TestCacheMatrixValueSemantics(unittest.TestCase):
    def test_mutating_source_array_does_not_affect_matrix(self):
        src = np.array([[2.0, 3.0], [2.0, 2.0]])
        m = CacheMatrix(src)
        src[0, 0] = 100.0
        self.assertEqual(m.get_matrix()[0, 0], 2.0)

    def test_mutating_returned_matrix_does_not_affect_matrix(self):
        m = CacheMatrix([[2.0, 3.0], [2.0, 2.0]])
        out = m.get_matrix()
        out[0, 0] = 100.0
        self.assertEqual(m.get_matrix()[0, 0], 2.0)

    def test_mutating_returned_inverse_does_not_affect_cache(self):
        m = CacheMatrix([[2.0, 3.0], [2.0, 2.0]])
        m.set_inverse([[-1.0, 1.5], [1.0, -1.0]])
        out = m.get_inverse()
        out[0, 0] = 42.0
        self.assertEqual(m.get_inverse()[0, 0], -1.0)

    def test_numpy_asarray_sees_a_copy(self):
        m = CacheMatrix([[2.0, 3.0], [2.0, 2.0]])
        arr = np.asarray(m)
        np.testing.assert_array_equal(arr, m.get_matrix())
        arr[1, 1] = -7.0
        self.assertEqual(m.get_matrix()[1, 1], 2.0)

    def test_array_protocol_refuses_copy_false(self):
        m = CacheMatrix([[2.0, 3.0], [2.0, 2.0]])
        with self.assertRaises(ValueError):
            m.__array__(copy=False)
        out = m.__array__(dtype=np.float32, copy=True)
        self.assertEqual(out.dtype, np.float32)


class TestCacheMatrixLocking(unittest.TestCase):
    def test_state_readers_wait_for_the_instance_lock(self):
        m = CacheMatrix([[2.0, 3.0], [2.0, 2.0]])
        seen = {}

        def read():
            seen["epoch"] = m.epoch
            seen["shape"] = m.shape
            seen["dtype"] = m.dtype

        with m._lock:
            reader = threading.Thread(target=read)
            reader.start()
            reader.join(timeout=0.1)
            self.assertTrue(reader.is_alive())
            m.set_matrix([[4.0]])
        reader.join()
        self.assertEqual(seen, {"epoch": 1, "shape": (1, 1), "dtype": np.dtype("float64")})


class TestSetInverseTrustsCaller(unittest.TestCase):
    def test_set_inverse_none_clears(self):
        m = CacheMatrix([[1.0]])
        m.set_inverse([[1.0]])
        m.set_inverse(None)
        self.assertIsNone(m.get_inverse())

    def test_set_inverse_nan_is_stored_silently(self):
        m = CacheMatrix([[1.0, 0.0], [0.0, 1.0]])
        with warnings.catch_warnings():
            warnings.simplefilter("error", CacheMatrixCacheWarning)
            m.set_inverse(np.nan)
        self.assertTrue(np.isnan(m.get_inverse()).all())

    def test_set_inverse_scalar_on_2x2_does_not_warn(self):
        m = CacheMatrix([[1.0, 0.0], [0.0, 1.0]])
        with warnings.catch_warnings():
            warnings.simplefilter("error", CacheMatrixCacheWarning)
            m.set_inverse(0.0)
        self.assertEqual(m.get_inverse().shape, ())

    def test_set_inverse_shape_mismatch_warns_but_stores(self):
        m = CacheMatrix([[1.0, 0.0], [0.0, 1.0]])
        with self.assertWarns(CacheMatrixCacheWarning):
            m.set_inverse([[1.0, 2.0, 3.0]])
        self.assertEqual(m.get_inverse().shape, (1, 3))

    def test_set_inverse_matching_shape_does_not_warn(self):
        m = CacheMatrix([[1.0, 0.0], [0.0, 1.0]])
        with warnings.catch_warnings():
            warnings.simplefilter("error", CacheMatrixCacheWarning)
            m.set_inverse(np.zeros((2, 2)))
        np.testing.assert_array_equal(m.get_inverse(), np.zeros((2, 2)))


if __name__ == "__main__":
    unittest.main()
