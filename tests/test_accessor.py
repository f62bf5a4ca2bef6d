import asyncio
import copy
import unittest

from pyquidquid import Quidquid, accessor_from
from pyquidquid.checkers import BuiltinChecker, JsonSchemaChecker
from pyquidquid.core.base_checker import BaseChecker
from pyquidquid.core.errors import FieldError, InvalidTypeError, MissingFieldError


class AccessorCases:
    """Behaviour shared by every checker backend."""

    checker: BaseChecker

    def body(self, value):
        return accessor_from(value, checker=self.checker)

    # Scalars

    async def test_valid_scalars_are_returned_unchanged(self):
        body = self.body({"name": "Ada", "age": 36, "ratio": 0.5, "admin": True})
        self.assertEqual(await body.pick_string("name"), "Ada")
        self.assertEqual(await body.pick_number("age"), 36)
        self.assertEqual(await body.pick_number("ratio"), 0.5)
        self.assertIs(await body.pick_boolean("admin"), True)

    async def test_zero_and_false_are_present_values(self):
        body = self.body({"count": 0, "enabled": False})
        self.assertEqual(await body.pick_number("count"), 0)
        self.assertIs(await body.pick_boolean("enabled"), False)
        self.assertEqual(await body.pick_number_optional("count"), 0)
        self.assertIs(await body.pick_boolean_optional("enabled"), False)

    async def test_missing_scalars_raise_missing_field(self):
        body = self.body({"nothing": None})
        for method in (body.pick_string, body.pick_number, body.pick_boolean):
            with self.assertRaises(MissingFieldError) as ctx:
                await method("nothing")
            self.assertEqual(str(ctx.exception), "nothing must not be empty")
            with self.assertRaises(MissingFieldError):
                await method("absent")

    async def test_empty_string_is_treated_as_missing(self):
        body = self.body({"name": ""})
        with self.assertRaises(MissingFieldError) as ctx:
            await body.pick_string("name")
        self.assertEqual(str(ctx.exception), "name must not be empty")
        self.assertIsNone(await body.pick_string_optional("name"))

    async def test_falsy_non_strings_are_missing_strings(self):
        body = self.body({"zero": 0, "no": False})
        with self.assertRaises(MissingFieldError):
            await body.pick_string("zero")
        with self.assertRaises(MissingFieldError):
            await body.pick_string("no")
        self.assertIsNone(await body.pick_string_optional("zero"))

    async def test_wrong_scalar_kinds_raise_invalid_type(self):
        body = self.body({"s": 5, "n": "5", "b": 1, "t": True})
        cases = [
            (body.pick_string, "s", "s must be a string"),
            (body.pick_number, "n", "n must be a number"),
            (body.pick_number, "t", "t must be a number"),
            (body.pick_boolean, "b", "b must be a boolean"),
        ]
        for method, key, message in cases:
            with self.assertRaises(InvalidTypeError) as ctx:
                await method(key)
            self.assertEqual(str(ctx.exception), message)
            self.assertEqual(ctx.exception.field, key)

    async def test_nan_is_not_a_number(self):
        with self.assertRaises(InvalidTypeError):
            await self.body({"n": float("nan")}).pick_number("n")

    async def test_optional_scalars(self):
        body = self.body({"name": "Ada", "age": "old"})
        self.assertEqual(await body.pick_string_optional("name"), "Ada")
        self.assertIsNone(await body.pick_number_optional("missing"))
        self.assertIsNone(await body.pick_boolean_optional("missing"))
        with self.assertRaises(InvalidTypeError):
            await body.pick_number_optional("age")

    async def test_optional_string_still_validates_present_values(self):
        with self.assertRaises(InvalidTypeError) as ctx:
            await self.body({"name": ["Ada"]}).pick_string_optional("name")
        self.assertEqual(str(ctx.exception), "name must be a string")

    # Arrays

    async def test_arrays_by_key(self):
        body = self.body({"tags": ["a", "b"], "scores": [1, 2.5], "empty": []})
        self.assertEqual(await body.pick_string_array("tags"), ["a", "b"])
        self.assertEqual(await body.pick_number_array("scores"), [1, 2.5])
        self.assertEqual(await body.pick_string_array("empty"), [])
        self.assertEqual(await body.pick_object_array("empty"), [])

    async def test_mixed_kind_array_is_rejected(self):
        with self.assertRaises(InvalidTypeError) as ctx:
            await self.body({"scores": [1, "x", 3]}).pick_number_array("scores")
        self.assertEqual(str(ctx.exception), "scores must be an array of numbers")

    async def test_non_array_is_rejected(self):
        body = self.body({"tags": "a,b", "items": {"a": 1}})
        with self.assertRaises(InvalidTypeError):
            await body.pick_string_array("tags")
        with self.assertRaises(InvalidTypeError) as ctx:
            await body.pick_object_array("items")
        self.assertEqual(str(ctx.exception), "items must be an array of objects")

    async def test_missing_array_raises_missing_field(self):
        with self.assertRaises(MissingFieldError) as ctx:
            await self.body({}).pick_number_array("scores")
        self.assertEqual(str(ctx.exception), "scores must not be empty")

    async def test_keyless_array_reads_the_body(self):
        self.assertEqual(await self.body(["a", "b"]).pick_string_array(), ["a", "b"])
        self.assertEqual(await self.body([3, 4]).pick_number_array(), [3, 4])

    async def test_keyless_array_errors_name_the_body(self):
        with self.assertRaises(InvalidTypeError) as ctx:
            await self.body("not-an-array").pick_string_array()
        self.assertEqual(str(ctx.exception), "body must be an array of strings")
        self.assertEqual(ctx.exception.field, "body")

        with self.assertRaises(MissingFieldError) as ctx:
            await self.body(None).pick_object_array()
        self.assertEqual(str(ctx.exception), "body must not be empty")

    async def test_empty_key_reads_the_body(self):
        self.assertEqual(await self.body(["x"]).pick_string_array(""), ["x"])

    async def test_optional_arrays(self):
        body = self.body({"tags": ["a"], "bad": [1]})
        self.assertEqual(await body.pick_string_array_optional("tags"), ["a"])
        self.assertIsNone(await body.pick_string_array_optional("missing"))
        self.assertIsNone(await body.pick_number_array_optional("missing"))
        self.assertIsNone(await body.pick_object_array_optional("missing"))
        with self.assertRaises(InvalidTypeError):
            await body.pick_string_array_optional("bad")

    # Objects

    async def test_pick_object_returns_scoped_child(self):
        body = self.body({"a": {"b": "value"}})
        child = await body.pick_object("a")
        self.assertIsInstance(child, Quidquid)
        self.assertEqual(child.path_prefix, "a")
        self.assertEqual(await child.pick_string("b"), "value")
        with self.assertRaises(MissingFieldError) as ctx:
            await child.pick_string("missing")
        self.assertEqual(str(ctx.exception), "a.missing must not be empty")

    async def test_nested_paths_accumulate(self):
        body = self.body({"a": {"b": {"c": 42}}})
        b = await (await body.pick_object("a")).pick_object("b")
        self.assertEqual(b.path_prefix, "a.b")
        with self.assertRaises(InvalidTypeError) as ctx:
            await b.pick_string("c")
        self.assertEqual(str(ctx.exception), "a.b.c must be a string")

    async def test_empty_object_is_present(self):
        child = await self.body({"meta": {}}).pick_object("meta")
        self.assertEqual(child.value, {})

    async def test_object_kind_errors(self):
        body = self.body({"list": [1], "text": "x"})
        for key in ("list", "text"):
            with self.assertRaises(InvalidTypeError) as ctx:
                await body.pick_object(key)
            self.assertEqual(str(ctx.exception), f"{key} must be an object")
        with self.assertRaises(MissingFieldError):
            await body.pick_object("missing")

    async def test_optional_object(self):
        body = self.body({"a": {"x": 1}, "bad": 3})
        self.assertIsNone(await body.pick_object_optional("missing"))
        child = await body.pick_object_optional("a")
        self.assertEqual(await child.pick_number("x"), 1)
        with self.assertRaises(InvalidTypeError):
            await body.pick_object_optional("bad")

    async def test_object_array_children_are_independent_siblings(self):
        items = await self.body([{"x": 1}, {"x": 2}]).pick_object_array()
        self.assertEqual(len(items), 2)
        self.assertEqual(await items[0].pick_number("x"), 1)
        self.assertEqual(await items[1].pick_number("x"), 2)
        self.assertIsNone(items[0].path_prefix)
        self.assertIsNone(items[1].path_prefix)

    async def test_object_array_children_are_not_scoped_to_parent(self):
        parent = await self.body({"order": {"lines": [{"sku": ""}]}}).pick_object("order")
        lines = await parent.pick_object_array("lines")
        with self.assertRaises(MissingFieldError) as ctx:
            await lines[0].pick_string("sku")
        self.assertEqual(str(ctx.exception), "sku must not be empty")

    async def test_object_array_rejects_non_object_elements(self):
        with self.assertRaises(InvalidTypeError) as ctx:
            await self.body({"items": [{"a": 1}, 2]}).pick_object_array("items")
        self.assertEqual(str(ctx.exception), "items must be an array of objects")

    # Wrapped values that are not objects

    async def test_keyed_reads_on_non_objects_are_missing(self):
        for value in (["a"], "text", 3, None):
            with self.assertRaises(MissingFieldError):
                await self.body(value).pick_string("a")

    # Accessor properties

    async def test_children_inherit_checker(self):
        child = await self.body({"a": {}}).pick_object("a")
        self.assertIs(child.checker, self.checker)

    async def test_reads_never_mutate_the_value(self):
        payload = {"a": {"b": ["x"]}, "items": [{"n": 1}], "s": ""}
        snapshot = copy.deepcopy(payload)
        body = self.body(payload)
        child = await body.pick_object("a")
        await child.pick_string_array("b")
        await body.pick_object_array("items")
        await body.pick_string_optional("s")
        self.assertEqual(payload, snapshot)
        self.assertIs(body.value, payload)

    async def test_concurrent_reads_are_independent(self):
        body = self.body({"name": "Ada", "age": 36, "tags": ["x"], "bad": 1})
        results = await asyncio.gather(
            body.pick_string("name"),
            body.pick_number("age"),
            body.pick_string_array("tags"),
            body.pick_string("bad"),
            return_exceptions=True,
        )
        self.assertEqual(results[:3], ["Ada", 36, ["x"]])
        self.assertIsInstance(results[3], InvalidTypeError)

    async def test_errors_are_value_errors(self):
        with self.assertRaises(ValueError):
            await self.body({}).pick_string("x")
        with self.assertRaises(FieldError):
            await self.body({"x": 1}).pick_string("x")


class TestAccessorWithJsonSchema(AccessorCases, unittest.IsolatedAsyncioTestCase):
    checker = JsonSchemaChecker()


class TestAccessorWithBuiltin(AccessorCases, unittest.IsolatedAsyncioTestCase):
    checker = BuiltinChecker()


class RejectAllChecker(BaseChecker):
    name = "reject-all"

    def is_string(self, value):
        return False

    def is_number(self, value):
        return False

    def is_boolean(self, value):
        return False

    def is_object(self, value):
        return False

    def is_array(self, value):
        return False


class TestCheckerInjection(unittest.IsolatedAsyncioTestCase):

    async def test_default_checker_is_jsonschema(self):
        self.assertEqual(accessor_from({}).checker.name, "jsonschema")

    async def test_injected_checker_decides_validity(self):
        body = Quidquid.from_value({"name": "Ada", "tags": ["a"]}, checker=RejectAllChecker())
        with self.assertRaises(InvalidTypeError):
            await body.pick_string("name")
        with self.assertRaises(InvalidTypeError):
            await body.pick_string_array("tags")

    async def test_presence_is_checked_before_validation(self):
        body = Quidquid.from_value({}, checker=RejectAllChecker())
        with self.assertRaises(MissingFieldError):
            await body.pick_number("missing")
        self.assertIsNone(await body.pick_number_optional("missing"))

    async def test_full_name(self):
        self.assertEqual(accessor_from({}).full_name("x"), "x")
        self.assertEqual(Quidquid({}, path_prefix="a.b").full_name("x"), "a.b.x")


if __name__ == '__main__':
    unittest.main()
