"""Example cases. Run with: caseledger run examples/math_cases.py"""

from caseledger import test_case


@test_case("math")
def math(t):
    t.assert_eq(2 + 2, 4)
    t.assert_gt(1, 5)
    t.assert_leq(3, 3)


@math.test_function
def ordering(t):
    t.assert_lt("apple", "banana")
    t.assert_uneq([1, 2], [2, 1])


@test_case("buffers")
def buffers(t):
    buf = t.allocate(bytearray, 16)
    t.assert_eq(len(buf), 16)
    t.deallocate(buf)
