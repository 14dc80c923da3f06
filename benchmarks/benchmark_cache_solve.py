import time
import numpy as np
import cachematrix

def benchmark_cache_solve(n, iterations=20):
    print(f"\n--- Benchmarking cache_solve (N={n}) ---")

    # Diagonally dominant, so always invertible
    a_np = np.random.rand(n, n)
    a_np += np.eye(n) * n

    m = cachematrix.CacheMatrix(a_np)

    start = time.perf_counter()
    cachematrix.cache_solve(m)
    cold = time.perf_counter() - start
    print(f"cache_solve (cold):   {cold:.6f} s")

    start = time.perf_counter()
    for _ in range(iterations):
        cachematrix.cache_solve(m)
    warm = (time.perf_counter() - start) / iterations
    print(f"cache_solve (cached): {warm:.6f} s")

    start = time.perf_counter()
    for _ in range(iterations):
        np.linalg.inv(a_np)
    raw = (time.perf_counter() - start) / iterations
    print(f"NumPy inv:            {raw:.6f} s")

    speedup = raw / warm if warm > 0 else 0
    print(f"Speedup vs NumPy:     {speedup:.2f}x")

if __name__ == "__main__":
    cachematrix.reset_cache_stats()
    for n in [64, 256, 1024]:
        benchmark_cache_solve(n)
    print("\nStats:", cachematrix.cache_stats())
