"""Tests for the Java function extractor."""

import pytest

from funcdiff.extractor import FunctionExtractor, FunctionInventory


@pytest.fixture
def extractor() -> FunctionExtractor:
    return FunctionExtractor()


class TestFunctionInventory:
    """Test FunctionInventory bookkeeping."""

    def test_add_collects_variants(self):
        """Repeated keys accumulate signatures and bodies as sets."""
        inventory = FunctionInventory()
        inventory.add("Foo.bar", "int bar ( )", "{ return 1 ; }")
        inventory.add("Foo.bar", "int bar ( int x )", "{ return x ; }")
        inventory.add("Foo.bar", "int bar ( )", "{ return 1 ; }")

        assert len(inventory) == 1
        assert inventory["Foo.bar"].signatures == {"int bar ( )", "int bar ( int x )"}
        assert inventory["Foo.bar"].bodies == {"{ return 1 ; }", "{ return x ; }"}

    def test_add_without_body(self):
        """Abstract methods contribute a signature only."""
        inventory = FunctionInventory()
        inventory.add("Shape.area", "abstract double area ( )", None)

        assert "Shape.area" in inventory
        assert inventory["Shape.area"].bodies == set()


class TestFunctionExtractor:
    """Test FunctionExtractor.extract."""

    def test_absent_and_blank_sources(self, extractor):
        """None, empty and whitespace-only input give empty inventories."""
        for source in (None, "", "   \n\t  "):
            inventory = extractor.extract(source)
            assert len(inventory) == 0
            assert inventory.parse_failed is False

    def test_simple_class(self, extractor):
        """Methods are keyed by class name and method name."""
        source = (
            "package com.example;\n"
            "public class Foo {\n"
            "    public int bar() { return 1; }\n"
            "    private void baz(String s) { System.out.println(s); }\n"
            "}\n"
        )
        inventory = extractor.extract(source)

        assert inventory.keys() == {"Foo.bar", "Foo.baz"}
        assert inventory["Foo.bar"].signatures == {"public int bar ( )"}
        assert inventory["Foo.bar"].bodies == {"{ return 1 ; }"}

    def test_whitespace_is_normalized(self, extractor):
        """Layout edits do not alter signatures or bodies."""
        compact = "class Foo { int bar(int a, int b) { return a + b; } }"
        spread = (
            "class Foo {\n"
            "    // adds numbers\n"
            "    int bar(int a,\n"
            "            int b) {\n"
            "        return a   +   b;\n"
            "    }\n"
            "}\n"
        )
        first = extractor.extract(compact)
        second = extractor.extract(spread)

        assert first["Foo.bar"].signatures == second["Foo.bar"].signatures
        assert first["Foo.bar"].bodies == second["Foo.bar"].bodies

    def test_comments_inside_bodies_are_significant(self, extractor):
        """A comment-only edit inside a method changes its body."""
        plain = extractor.extract("class Foo { int bar() { return 1; } }")
        commented = extractor.extract("class Foo { int bar() { // note\n return 1; } }")

        assert commented["Foo.bar"].bodies == {"{ // note return 1 ; }"}
        assert plain["Foo.bar"].bodies != commented["Foo.bar"].bodies
        assert plain["Foo.bar"].signatures == commented["Foo.bar"].signatures

    def test_comments_in_signatures_are_dropped(self, extractor):
        """Comments between signature tokens do not alter the signature."""
        plain = extractor.extract("class Foo { int bar(int a) { return a; } }")
        commented = extractor.extract("class Foo { int /* count */ bar(int a) { return a; } }")

        assert plain["Foo.bar"].signatures == commented["Foo.bar"].signatures

    def test_string_literal_contents_are_significant(self, extractor):
        """Whitespace inside string literals is part of the body."""
        first = extractor.extract('class Foo { String s() { return "a b"; } }')
        second = extractor.extract('class Foo { String s() { return "a  b"; } }')

        assert first["Foo.s"].bodies != second["Foo.s"].bodies

    def test_annotations_excluded_from_signature(self, extractor):
        """Method annotations are not part of the signature."""
        plain = extractor.extract("class Foo { public String name() { return null; } }")
        annotated = extractor.extract(
            "class Foo { @Override @Deprecated public String name() { return null; } }"
        )

        assert plain["Foo.name"].signatures == annotated["Foo.name"].signatures

    def test_signature_covers_modifiers_params_return_and_throws(self, extractor):
        """Each signature component distinguishes signatures."""
        base = extractor.extract("class Foo { int bar(int a) { return a; } }")
        variants = [
            "class Foo { public int bar(int a) { return a; } }",
            "class Foo { long bar(int a) { return a; } }",
            "class Foo { int bar(long a) { return a; } }",
            "class Foo { int bar(int a) throws Exception { return a; } }",
            "class Foo { <T> int bar(int a) { return a; } }",
        ]
        for source in variants:
            other = extractor.extract(source)
            assert other["Foo.bar"].signatures != base["Foo.bar"].signatures, source

    def test_overloads_collapse_onto_one_key(self, extractor):
        """Overloaded methods share a key with one variant per overload."""
        source = (
            "class Calc {\n"
            "    int add(int a, int b) { return a + b; }\n"
            "    double add(double a, double b) { return a + b; }\n"
            "}\n"
        )
        inventory = extractor.extract(source)

        assert inventory.keys() == {"Calc.add"}
        assert len(inventory["Calc.add"].signatures) == 2
        assert len(inventory["Calc.add"].bodies) == 1

    def test_constructors_are_not_functions(self, extractor):
        """Constructors are skipped."""
        inventory = extractor.extract("class Foo { Foo() {} void run() {} }")

        assert inventory.keys() == {"Foo.run"}

    def test_nested_types_use_nearest_enclosing_name(self, extractor):
        """Members of nested types are keyed by the nested type."""
        source = (
            "class Outer {\n"
            "    void a() {}\n"
            "    static class Inner {\n"
            "        void b() {}\n"
            "    }\n"
            "}\n"
        )
        inventory = extractor.extract(source)

        assert inventory.keys() == {"Outer.a", "Inner.b"}

    def test_interfaces_enums_and_records(self, extractor):
        """Every kind of type declaration contributes its methods."""
        source = (
            "interface Shape {\n"
            "    double area();\n"
            "    default String label() { return \"shape\"; }\n"
            "}\n"
            "enum Color {\n"
            "    RED, GREEN;\n"
            "    String lower() { return name().toLowerCase(); }\n"
            "}\n"
            "record Point(int x, int y) {\n"
            "    int sum() { return x + y; }\n"
            "}\n"
        )
        inventory = extractor.extract(source)

        assert inventory.keys() == {"Shape.area", "Shape.label", "Color.lower", "Point.sum"}
        assert inventory["Shape.area"].bodies == set()

    def test_anonymous_class_methods_are_skipped(self, extractor):
        """Methods of anonymous classes belong to no type declaration."""
        source = (
            "class Foo {\n"
            "    Runnable make() {\n"
            "        return new Runnable() {\n"
            "            public void run() {}\n"
            "        };\n"
            "    }\n"
            "}\n"
        )
        inventory = extractor.extract(source)

        assert inventory.keys() == {"Foo.make"}

    def test_parse_failure_gives_empty_inventory(self, extractor):
        """Syntax errors are recorded, not raised."""
        source = "public class Foo {\n    int bar( {\n        return 1;\n}\n"
        inventory = extractor.extract(source)

        assert len(inventory) == 0
        assert inventory.parse_failed is True
        assert inventory.diagnostics[0].code == "PARSE_FAILED"

    def test_extract_is_deterministic(self, extractor):
        """Extracting the same text twice yields equal inventories."""
        source = "class Foo { int bar() { return 1; } void baz() {} }"

        assert extractor.extract(source) == extractor.extract(source)
