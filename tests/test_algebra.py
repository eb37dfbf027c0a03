"""
Tests for multivector records, linear operators and conversion.
"""

import copy
import math
import pickle
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
import torch

from pga2d.core import ShapeMismatchError
from pga2d.pga import (
    ABSENT,
    Real,
    Shape,
    GenericMultiVector,
    MultiVector,
    Scalar,
    Vector,
    Line,
    BiVector,
    Point,
    TriVector,
    Motor,
    shape_class,
    negate,
    add,
    subtract,
    convert,
    can_convert,
    allclose,
)

from conftest import NAMED_SHAPES


class TestConstruction:
    """Tests for building records."""

    def test_positional_values_fill_real_slots_in_order(self):
        v = Vector(1.0, 2.0, 3.0)
        assert v.value("e0") == 1.0
        assert v.value("e1") == 2.0
        assert v.value("e2") == 3.0

    def test_keyword_values(self):
        p = BiVector(e12=1.0, e01=2.0)
        assert p.value("e01") == 2.0
        assert p.value("e12") == 1.0

    def test_omitted_real_slots_are_real_zero(self):
        p = BiVector(e12=1.0)
        assert p.tag("e02") == Real(0.0)
        assert isinstance(p.tag("e02"), Real)

    def test_absent_slots_read_as_zero(self):
        v = Vector(1.0, 2.0, 3.0)
        assert v.tag("s") is ABSENT
        assert v.value("s") == 0.0
        assert v.e012.item() == 0.0

    def test_indexing(self):
        v = Vector(1.0, 2.0, 3.0)
        assert v["e1"].item() == 2.0
        assert v[3].item() == 3.0

    def test_too_many_positional_values(self):
        with pytest.raises(TypeError, match="at most 3"):
            Vector(1.0, 2.0, 3.0, 4.0)

    def test_duplicate_slot(self):
        with pytest.raises(TypeError, match="multiple values"):
            Vector(1.0, e0=2.0)

    def test_unknown_slot(self):
        with pytest.raises(TypeError, match="Unknown basis slot"):
            Vector(e3=1.0)

    def test_value_for_absent_slot(self):
        with pytest.raises(ShapeMismatchError) as excinfo:
            Vector(s=1.0)
        assert excinfo.value.slots == ("s",)

    def test_base_class_has_no_shape(self):
        with pytest.raises(TypeError, match="no shape"):
            GenericMultiVector()

    def test_dtype(self):
        v = Vector(1.0, 2.0, 3.0, dtype=torch.float64)
        assert v.dtype == torch.float64
        assert Vector().dtype == torch.float32

    def test_aliases(self):
        assert Line is Vector
        assert Point is BiVector

    def test_named_shapes(self):
        assert Scalar.SHAPE == Shape.of("s")
        assert Vector.SHAPE == Shape.of_grade(1)
        assert BiVector.SHAPE == Shape.of_grade(2)
        assert TriVector.SHAPE == Shape.of("e012")
        assert Motor.SHAPE == Shape.of_grade(0, 2)
        assert MultiVector.SHAPE == Shape.full()


class TestShapeClass:

    def test_named_shape_returns_specialization(self):
        assert shape_class(Shape.of("e0", "e1", "e2")) is Vector
        assert shape_class(Shape.full()) is MultiVector

    def test_anonymous_class_is_created_once(self):
        shape = Shape.of("s", "e012")
        cls = shape_class(shape)
        assert cls is shape_class(Shape.of("e012", "s"))
        assert issubclass(cls, GenericMultiVector)
        assert cls.__name__ == "GenericMultiVector[s, e012]"

    def test_anonymous_class_construction(self):
        cls = shape_class(Shape.of("s", "e012"))
        x = cls(1.0, 2.0)
        assert x.value("e012") == 2.0
        assert x.tag("e1") is ABSENT

    def test_concurrent_creation_yields_one_class(self):
        shape = Shape.of("e1", "e01", "e012")
        barrier = threading.Barrier(8)

        def create(_):
            barrier.wait()
            return shape_class(shape)

        with ThreadPoolExecutor(max_workers=8) as pool:
            classes = list(pool.map(create, range(8)))
        assert len(set(classes)) == 1
        assert classes[0] is shape_class(shape)


class TestValueSemantics:

    def test_immutable(self):
        v = Vector(1.0, 2.0, 3.0)
        with pytest.raises(AttributeError):
            v.e0 = 5.0
        with pytest.raises(AttributeError):
            v._components = ()

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Vector())

    def test_copy_returns_same_record(self):
        v = Vector(1.0, 2.0, 3.0)
        assert copy.copy(v) is v
        assert copy.deepcopy(v) is v

    def test_pickle(self):
        m = Motor(1.0, 2.0, 3.0, 4.0)
        restored = pickle.loads(pickle.dumps(m))
        assert type(restored) is Motor
        assert restored == m
        assert restored.tag("e0") is ABSENT

    def test_pickle_anonymous_shape(self):
        x = shape_class(Shape.of("s", "e1"))(1.0, 2.0)
        restored = pickle.loads(pickle.dumps(x))
        assert type(restored) is type(x)
        assert restored == x

    def test_repr(self):
        assert repr(Vector(1.0, 2.0, 3.0)) == "Vector(e0=1.0, e1=2.0, e2=3.0)"
        assert repr(BiVector(torch.zeros(4), 0.0, 1.0)) == "BiVector(batch_shape=(4,))"


class TestEquality:

    def test_equal_records(self):
        assert Vector(1.0, 2.0, 3.0) == Vector(1.0, 2.0, 3.0)
        assert Vector(1.0, 2.0, 3.0) != Vector(1.0, 2.0, 4.0)

    def test_absent_equals_real_zero(self):
        assert Vector(0.0, 1.0, 0.0) == MultiVector(e1=1.0)
        assert Scalar(0.0) == Vector()

    def test_exact_comparison(self):
        assert Scalar(1.0) != Scalar(1.0 + 1e-6)

    def test_not_a_multivector(self):
        assert Scalar(1.0) != 1.0

    def test_allclose(self):
        assert allclose(Scalar(1.0), Scalar(1.0 + 1e-7))
        assert not allclose(Scalar(1.0), Scalar(1.1))
        assert allclose(Vector(0.0, 1.0, 0.0), MultiVector(e1=1.0))

    def test_non_broadcastable_batches_are_unequal(self):
        a = Vector(torch.zeros(2), 0.0, 0.0)
        b = Vector(torch.zeros(3), 0.0, 0.0)
        assert a != b
        assert not (a == b)

    def test_mixed_dtype_equality(self):
        value = torch.tensor(0.1, dtype=torch.float64)
        mixed = Scalar(1.0) + Vector(value, 0.0, 0.0)
        assert mixed - Scalar(1.0) == Vector(value, 0.0, 0.0)
        assert allclose(Vector(value, 0.0, 0.0), mixed - Scalar(1.0), atol=0.0)


class TestNegate:

    @pytest.mark.parametrize("cls", NAMED_SHAPES)
    def test_shape_preserved(self, cls, make_random):
        a = make_random(cls)
        assert type(-a) is cls
        assert type(negate(a)) is cls

    @pytest.mark.parametrize("cls", NAMED_SHAPES)
    def test_involution(self, cls, make_random):
        a = make_random(cls)
        assert -(-a) == a

    def test_absent_slots_stay_absent(self):
        n = -Vector(1.0, 2.0, 3.0)
        assert n.tag("s") is ABSENT
        assert n.value("e1") == -2.0


class TestAddSubtract:

    def test_same_shape(self):
        result = Vector(1.0, 2.0, 3.0) + Vector(10.0, 20.0, 30.0)
        assert type(result) is Vector
        assert result == Vector(11.0, 22.0, 33.0)

    def test_result_shape_is_union(self):
        result = Scalar(1.0) + BiVector(e12=2.0)
        assert type(result) is Motor
        assert result.tag("e01") == Real(0.0)
        assert result.tag("e0") is ABSENT

    def test_anonymous_union(self):
        result = Scalar(1.0) + Vector(0.0, 1.0, 0.0)
        assert result.SHAPE == Shape.of("s", "e0", "e1", "e2")
        assert type(result).__name__ == "GenericMultiVector[s, e0, e1, e2]"

    def test_absent_plus_real_keeps_value(self):
        result = add(Scalar(3.0), TriVector(4.0))
        assert result.value("s") == 3.0
        assert result.value("e012") == 4.0

    def test_absent_minus_real_negates(self):
        result = subtract(Scalar(3.0), TriVector(4.0))
        assert result.value("e012") == -4.0

    @pytest.mark.parametrize("lhs", NAMED_SHAPES)
    @pytest.mark.parametrize("rhs", NAMED_SHAPES)
    def test_commutative(self, lhs, rhs, make_random):
        a, b = make_random(lhs), make_random(rhs)
        assert a + b == b + a
        assert (a + b).SHAPE == lhs.SHAPE | rhs.SHAPE

    @pytest.mark.parametrize("cls", NAMED_SHAPES)
    def test_additive_inverse(self, cls, make_random):
        a = make_random(cls)
        zero = a + (-a)
        assert type(zero) is cls
        assert zero == MultiVector()
        assert all(isinstance(zero.tag(name), Real) for name in cls.SHAPE)

    @pytest.mark.parametrize("lhs", NAMED_SHAPES)
    @pytest.mark.parametrize("rhs", NAMED_SHAPES)
    def test_subtract_is_add_negated(self, lhs, rhs, make_random):
        a, b = make_random(lhs), make_random(rhs)
        assert a - b == a + (-b)

    def test_associative(self, make_random):
        a, b, c = make_random(Vector), make_random(Motor), make_random(TriVector)
        assert allclose((a + b) + c, a + (b + c))
        assert ((a + b) + c).SHAPE == (a + (b + c)).SHAPE


class TestScalarPromotion:

    def test_number_on_either_side(self):
        v = Vector(1.0, 2.0, 3.0)
        assert (v + 1).SHAPE == Shape.of("s", "e0", "e1", "e2")
        assert (1 + v) == (v + 1)
        assert (2.0 * v) == Vector(2.0, 4.0, 6.0)
        assert (v * 2.0) == Vector(2.0, 4.0, 6.0)
        assert (1.0 - v).value("e0") == -1.0

    def test_division(self):
        v = Vector(2.0, 4.0, 6.0) / 2
        assert type(v) is Vector
        assert v == Vector(1.0, 2.0, 3.0)

    def test_tensor_operand(self):
        v = Vector(1.0, 2.0, 3.0) * torch.tensor([1.0, 2.0])
        assert v.batch_shape == torch.Size([2])
        assert torch.equal(v.e2, torch.tensor([3.0, 6.0]))

    def test_unsupported_operand(self):
        with pytest.raises(TypeError):
            Vector() + "line"


class TestSpecialValues:

    def test_nan_propagates(self):
        result = Scalar(float("nan")) + Scalar(1.0)
        assert math.isnan(result.value("s"))

    def test_infinity_propagates(self):
        result = Vector(float("inf"), 0.0, 0.0) * Vector(0.0, 1.0, 0.0)
        assert result.value("e01") == float("inf")


class TestConvert:
    """Tests for widening between shapes."""

    def test_widen_vector_into_multivector(self):
        v = Vector(1.0, 2.0, 3.0)
        m = convert(v, MultiVector)
        assert type(m) is MultiVector
        assert m.tag("s") == Real(0.0)
        assert m.value("e1") == 2.0
        assert m == v

    def test_into_method(self):
        m = Scalar(2.0).into(Motor)
        assert type(m) is Motor
        assert m.value("s") == 2.0
        assert isinstance(m.tag("e12"), Real)

    def test_into_shape(self):
        x = Scalar(2.0).into(Shape.of("s", "e012"))
        assert x.SHAPE == Shape.of("s", "e012")

    def test_same_shape_is_noop(self):
        v = Vector(1.0, 2.0, 3.0)
        assert convert(v, Vector) == v

    def test_narrowing_raises(self):
        with pytest.raises(ShapeMismatchError) as excinfo:
            Motor(1.0, 2.0, 3.0, 4.0).into(BiVector)
        assert excinfo.value.slots == ("s",)
        assert "would be discarded" in str(excinfo.value)

    def test_rejection_ignores_values(self):
        """A slot holding zero still cannot be dropped."""
        with pytest.raises(ShapeMismatchError):
            Scalar(0.0).into(Vector)

    def test_error_is_a_type_error(self):
        with pytest.raises(TypeError):
            MultiVector().into(Scalar)

    def test_can_convert(self):
        assert can_convert(Scalar, Motor)
        assert can_convert(Vector, MultiVector)
        assert can_convert(Vector(), Vector)
        assert not can_convert(Motor, BiVector)
        assert not can_convert(MultiVector, Vector)

    @pytest.mark.parametrize("cls", NAMED_SHAPES)
    def test_everything_widens_into_multivector(self, cls, make_random):
        a = make_random(cls)
        assert a.into(MultiVector) == a

    def test_batched_widening(self):
        v = Vector(torch.tensor([1.0, 2.0]), 0.0, 0.0)
        m = v.into(MultiVector)
        assert m.s.shape == torch.Size([2])


class TestTensorConversion:

    def test_to_tensor(self):
        t = Vector(1.0, 2.0, 3.0).to_tensor()
        assert t.shape == (8,)
        assert t.tolist() == [0.0, 1.0, 2.0, 3.0, 0.0, 0.0, 0.0, 0.0]

    def test_to_list_and_dict(self):
        m = MultiVector(1, 2, 3, 4, 5, 6, 7, 8)
        assert m.to_list() == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0]
        assert m.to_dict()["e012"] == 8.0

    def test_batched_to_tensor(self):
        p = BiVector(torch.tensor([1.0, 2.0, 3.0]), 0.0, 1.0)
        t = p.to_tensor()
        assert t.shape == (3, 8)
        assert torch.equal(t[:, 6], torch.ones(3))

    def test_from_tensor(self):
        t = torch.arange(8, dtype=torch.float32)
        m = MultiVector.from_tensor(t)
        assert m.value("e012") == 7.0
        assert torch.equal(m.to_tensor(), t)

    def test_from_tensor_batched(self):
        t = torch.zeros(5, 8)
        t[:, 2] = 1.0
        v = Vector.from_tensor(t)
        assert v.batch_shape == torch.Size([5])
        assert v.tag("s") is ABSENT

    def test_from_tensor_rejects_nonzero_absent_slot(self):
        t = torch.zeros(8)
        t[0] = 1.0
        with pytest.raises(ShapeMismatchError):
            Vector.from_tensor(t)

    def test_from_tensor_wrong_width(self):
        with pytest.raises(ValueError, match="Expected 8 components"):
            MultiVector.from_tensor(torch.zeros(7))

    def test_mixed_dtype_record_promotes(self):
        value = torch.tensor(0.1, dtype=torch.float64)
        mixed = Scalar(1.0) + Vector(value, 0.0, 0.0)
        assert mixed.dtype == torch.float64
        t = mixed.to_tensor()
        assert t.dtype == torch.float64
        assert t[1].item() == value.item()
        assert type(mixed).from_tensor(t) == mixed


class TestGradeAndReverse:

    def test_grade_projection(self):
        m = MultiVector(1, 2, 3, 4, 5, 6, 7, 8)
        assert type(m.grade(0)) is Scalar
        assert type(m.grade(1)) is Vector
        assert type(m.grade(2)) is BiVector
        assert type(m.grade(3)) is TriVector
        assert m.grade(2) == BiVector(5.0, 6.0, 7.0)

    def test_grade_keeps_only_present_slots(self):
        g = Motor(1.0, 2.0, 3.0, 4.0).grade(1)
        assert g.SHAPE == Shape.empty()
        assert g == MultiVector()

    def test_grade_out_of_range(self):
        with pytest.raises(ValueError, match="Grade must be"):
            MultiVector().grade(4)

    def test_reverse(self):
        m = MultiVector(1, 2, 3, 4, 5, 6, 7, 8)
        assert ~m == MultiVector(1, 2, 3, 4, -5, -6, -7, -8)
        assert type(Motor(1.0, 2.0, 3.0, 4.0).reverse()) is Motor

    @pytest.mark.parametrize("cls", NAMED_SHAPES)
    def test_reverse_is_involution(self, cls, make_random):
        a = make_random(cls)
        assert ~~a == a
