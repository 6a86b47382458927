"""
Тесты рендеринга шаблонов.

Покрывают вычисление выражений, цепочку областей видимости,
вызовы функций хоста и ошибки времени выполнения.
"""

import asyncio

import pytest

from silhouette import TemplateEngine, to_object
from silhouette.errors import (
    SilhouetteError,
    UndefinedVariableError,
    UnknownKeyError,
    UnknownPropertyError,
)
from silhouette.parser import parse_template
from silhouette.renderer import TemplateRenderer
from silhouette.values import Arguments, FunctionValue, IntValue, ObjectValue, StringValue


class TestBasicRendering:

    @pytest.mark.asyncio
    async def test_plain_text(self, render):
        assert await render("Hello World") == "Hello World"

    @pytest.mark.asyncio
    async def test_empty_template(self, render):
        assert await render("") == ""

    @pytest.mark.asyncio
    async def test_empty_tag(self, render):
        assert await render("{{}}") == ""

    @pytest.mark.asyncio
    async def test_variables(self, render):
        assert await render("Name: {{ name }}, Age: {{ age }}", name="Charlie", age=25) == "Name: Charlie, Age: 25"

    @pytest.mark.asyncio
    async def test_comment_renders_nothing(self, render):
        assert await render("a{{# hidden #}}b") == "ab"

    @pytest.mark.asyncio
    async def test_comment_keeps_surrounding_whitespace(self, render):
        assert await render("A {{# c #}} B") == "A  B"

    @pytest.mark.asyncio
    async def test_whitespace_control(self, render):
        source = "<ul>\n  {{- item -}}\n</ul>"
        assert await render(source, item="x") == "<ul>x</ul>"


class TestLiterals:

    @pytest.mark.asyncio
    async def test_strings(self, render):
        assert await render("{{ \"Hello\" }} {{ 'World' }}") == "Hello World"

    @pytest.mark.asyncio
    async def test_numbers(self, render):
        assert await render("{{ 42 }} {{ 3.14 }}") == "42 3.14"

    @pytest.mark.asyncio
    async def test_negative_numbers(self, render):
        assert await render("{{ -42 }} {{ -3.14 }} {{ -0 }}") == "-42 -3.14 0"

    @pytest.mark.asyncio
    async def test_booleans_and_null(self, render):
        assert await render("{{ true }} {{ false }} {{ null }}") == "true false null"

    @pytest.mark.asyncio
    async def test_literal_members(self, render):
        assert await render("{{ 'abc'.length }} {{ 7.isOdd }} {{ 3.7.round() }}") == "3 true 4"


class TestPropertyAndIndexAccess:

    @pytest.mark.asyncio
    async def test_nested_properties(self):
        company = {"department": {"manager": "Eve"}}
        engine = TemplateEngine()
        template = engine.compile("{{ company.department.manager }}")

        result = await template.render(to_object({"company": company}, nested_objects=True))

        assert result == "Eve"

    @pytest.mark.asyncio
    async def test_builtin_properties(self, render):
        result = await render(
            "First: {{ items.first }}, Last: {{ items.last }}, Count: {{ items.length }}",
            items=[1, 2, 3],
        )
        assert result == "First: 1, Last: 3, Count: 3"

    @pytest.mark.asyncio
    async def test_list_index(self, render):
        assert await render("{{ items[1] }}", items=["a", "b", "c"]) == "b"

    @pytest.mark.asyncio
    async def test_map_index(self, render):
        assert await render('{{ config["host"] }}', config={"host": "localhost", "port": 8080}) == "localhost"

    @pytest.mark.asyncio
    async def test_index_with_expression(self, render):
        assert await render("{{ items[pos] }}", items=["a", "b"], pos=1) == "b"

    @pytest.mark.asyncio
    async def test_complex_chain(self, engine):
        context = to_object(
            {"users": [{"addresses": [{"city": "new york"}]}]},
            nested_objects=True,
        )
        template = engine.compile('{{ users[0]["addresses"][0]["city"].toUpperCase }}')

        assert await template.render(context) == "NEW YORK"


class TestMethodCalls:

    @pytest.mark.asyncio
    async def test_string_methods(self, render):
        assert await render("{{ text.toUpperCase }}, {{ text.substring(0) }}", text="hello") == "HELLO, hello"
        assert await render("{{ text.substring(0, end: 3) }}", text="hello") == "hel"
        assert await render('{{ text.replace("hello", "hi") }}', text="hello world") == "hi world"
        assert await render("{{ text.trim() }}", text="  hello world  ") == "hello world"

    @pytest.mark.asyncio
    async def test_replace_first_only(self, render):
        result = await render('Replace first: {{ s.replace("o", "X", all: false) }}', s="hello world")
        assert result == "Replace first: hellX world"

    @pytest.mark.asyncio
    async def test_number_methods(self, render):
        result = await render(
            "Abs: {{ n.abs() }}, Round: {{ n.round() }}, Floor: {{ n.floor() }}, Ceil: {{ n.ceil() }}",
            n=-3.14,
        )
        assert result == "Abs: 3.14, Round: -3, Floor: -4, Ceil: -3"
        assert await render("Fixed: {{ n.toStringAsFixed(2) }}", n=123) == "Fixed: 123.00"

    @pytest.mark.asyncio
    async def test_round_and_fixed_agree_on_halves(self, render):
        source = "{{ 2.5.round() }} {{ 2.5.toStringAsFixed(0) }} {{ 0.125.toStringAsFixed(2) }}"
        assert await render(source) == "3 3 0.13"

    @pytest.mark.asyncio
    async def test_list_methods(self, render):
        assert await render('{{ items.join(" ") }}', items=["a", "b", "c"]) == "a b c"
        assert await render("{{ items.reverse().join(',') }}", items=[1, 2, 3]) == "3,2,1"
        assert await render("{{ items.slice(start: 1).length }}", items=[1, 2, 3]) == "2"

    @pytest.mark.asyncio
    async def test_method_chain_on_split(self, render):
        assert await render("{{ csv.split(',').last.trim() }}", csv="a, b, c") == "c"


class TestFunctions:

    def setup_method(self):
        def greet(args: Arguments):
            name = args.positional[0] if args.positional else StringValue("World")
            return StringValue(f"Hello, {name}!")

        def add(args: Arguments):
            a, b = args.positional
            if not isinstance(a, IntValue) or not isinstance(b, IntValue):
                raise SilhouetteError("add() requires two integers")
            return IntValue(a.value + b.value)

        self.engine = TemplateEngine(globals=ObjectValue({
            "greet": FunctionValue(greet),
            "add": FunctionValue(add),
        }))

    @pytest.mark.asyncio
    async def test_custom_functions(self):
        template = self.engine.compile("{{ greet(name) }}, {{ add(x, y) }}")

        result = await template.render(to_object({"name": "Henry", "x": 10, "y": 20}))

        assert result == "Hello, Henry!, 30"

    @pytest.mark.asyncio
    async def test_default_argument(self):
        assert await self.engine.compile("{{ greet() }}").render() == "Hello, World!"

    @pytest.mark.asyncio
    async def test_function_error_propagates(self):
        template = self.engine.compile("{{ add(1, 'two') }}")

        with pytest.raises(SilhouetteError, match="add\\(\\) requires two integers"):
            await template.render()

    @pytest.mark.asyncio
    async def test_async_function(self):
        async def fetch(args: Arguments):
            await asyncio.sleep(0)
            return StringValue(f"fetched {args.named['id']}")

        engine = TemplateEngine(globals={"fetch": fetch})

        assert await engine.compile("{{ fetch(id: 7) }}").render() == "fetched 7"

    @pytest.mark.asyncio
    async def test_arguments_evaluated_positional_first(self):
        seen = []

        def track(label):
            def _fn(args):
                seen.append(label)
                return StringValue(label)
            return FunctionValue(_fn)

        def collect(args: Arguments):
            return StringValue(",".join(str(v) for v in args.positional) + "|" + ",".join(args.named))

        engine = TemplateEngine(globals=ObjectValue({
            "a": track("a"), "b": track("b"), "c": track("c"), "d": track("d"),
            "collect": FunctionValue(collect),
        }))
        template = engine.compile("{{ collect(x: a(), b(), y: c(), d()) }}")

        assert await template.render() == "b,d|x,y"
        assert seen == ["b", "d", "a", "c"]


class TestScopes:

    @pytest.mark.asyncio
    async def test_context_shadows_globals(self):
        engine = TemplateEngine(globals={"name": "global", "site": "example.org"})
        template = engine.compile("{{ name }} @ {{ site }}")

        assert await template.render({"name": "local"}) == "local @ example.org"
        assert await template.render() == "global @ example.org"

    @pytest.mark.asyncio
    async def test_builtin_properties_are_not_variables(self, render):
        """Имена встроенных свойств Object не становятся переменными."""
        with pytest.raises(UndefinedVariableError):
            await render("{{ length }}", name="x")

    @pytest.mark.asyncio
    async def test_renderer_without_context(self):
        renderer = TemplateRenderer(ObjectValue({"x": IntValue(1)}))

        assert await renderer.render(parse_template("{{ x }}")) == "1"


class TestRenderErrors:

    @pytest.mark.asyncio
    async def test_undefined_variable(self, render):
        with pytest.raises(UndefinedVariableError) as exc_info:
            await render("Hello {{ name }}!")

        assert str(exc_info.value) == "Undefined variable: name"

    @pytest.mark.asyncio
    async def test_null_property_access(self, render):
        with pytest.raises(SilhouetteError, match="Can't access properties of null"):
            await render("{{ user.name }}", user=None)

    @pytest.mark.asyncio
    async def test_unknown_property(self, render):
        with pytest.raises(UnknownPropertyError):
            await render("{{ text.unknownProperty }}", text="hello")

    @pytest.mark.asyncio
    async def test_unknown_method(self, render):
        with pytest.raises(UnknownPropertyError):
            await render("{{ text.unknownMethod() }}", text="hello")

    @pytest.mark.asyncio
    async def test_index_out_of_range(self, render):
        with pytest.raises(UnknownKeyError):
            await render("{{ items[99] }}", items=["hello"])

    @pytest.mark.asyncio
    async def test_missing_map_key(self, render):
        with pytest.raises(UnknownKeyError):
            await render('{{ data["missing"] }}', data={"existing": "value"})

    @pytest.mark.asyncio
    async def test_index_non_indexable(self, render):
        with pytest.raises(SilhouetteError, match="Cannot index StringValue"):
            await render("{{ text[0] }}", text="hello")

    @pytest.mark.asyncio
    async def test_index_evaluated_before_indexable_check(self):
        seen = []

        def key(args: Arguments):
            seen.append("key")
            return IntValue(0)

        engine = TemplateEngine(globals=ObjectValue({"key": FunctionValue(key)}))

        with pytest.raises(SilhouetteError, match="Cannot index StringValue"):
            await engine.compile("{{ n[key()] }}").render({"n": "x"})
        assert seen == ["key"]

    @pytest.mark.asyncio
    async def test_call_non_function(self, render):
        with pytest.raises(SilhouetteError, match="Can't call StringValue as a function"):
            await render("{{ text() }}", text="hello")

    @pytest.mark.asyncio
    async def test_undefined_function(self, render):
        with pytest.raises(UndefinedVariableError):
            await render("{{ unknownFunction() }}")

    @pytest.mark.asyncio
    async def test_failed_render_does_not_leak_state(self, engine):
        template = engine.compile("{{ a }}{{ b }}")

        with pytest.raises(UndefinedVariableError):
            await template.render({"a": "first"})

        assert await template.render({"a": "1", "b": "2"}) == "12"

    @pytest.mark.asyncio
    async def test_null_value_renders(self, render):
        assert await render("Value: {{ v }}!", v=None) == "Value: null!"
