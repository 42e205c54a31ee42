"""Tests for the Moo unparser."""

from pathlib import Path
from textwrap import dedent

from mooc.compiler import analyze_source
from mooc.parser.tree_builder import parse_moo
from mooc.unparse.unparser import unparse

FIXTURES = Path(__file__).parent / "fixtures"


class TestPlainUnparse:
    def test_empty_program(self):
        assert unparse(parse_moo("")) == ""

    def test_declarations(self):
        src = "struct P { int x; bool y; }; struct P p; int f(int a, struct P q) { return a; }"
        assert unparse(parse_moo(src)) == dedent("""\
            struct P {
                int x;
                bool y;
            };

            struct P p;
            int f(int a, struct P q) {
                return a;
            }

        """)

    def test_statements(self):
        src = """
        void f() {
            int i;
            cin >> i;
            cout << "n\\n";
            i++; i--;
            while (i < 3) { i = i + 1; }
            if (i == 3) { g(); } else { bool b; return; }
        }
        """
        assert unparse(parse_moo(src)) == dedent("""\
            void f() {
                int i;
                cin >> i;
                cout << "n\\n";
                i++;
                i--;
                while ((i < 3)) {
                    i = (i + 1);
                }
                if ((i == 3)) {
                    g();
                }
                else {
                    bool b;
                    return;
                }
            }

        """)

    def test_expressions_are_parenthesized(self):
        m = parse_moo("void f() { x = -a * (b - c) || !d && true; y = z = 1; s.t.u = g(1, h()); }")
        lines = unparse(m).splitlines()
        assert lines[1] == "    x = (((-a) * (b - c)) || ((!d) && true));"
        assert lines[2] == "    y = (z = 1);"
        assert lines[3] == "    ((s).t).u = g(1, h());"

    def test_unresolved_program_prints_bare_names(self):
        assert unparse(parse_moo("void f() { x = y; }")) == "void f() {\n    x = y;\n}\n\n"


class TestAnnotatedUnparse:
    def test_identifiers_carry_types(self):
        result = analyze_source("int x;\nvoid f(int a) { x = a + 1; if (a > 0) { bool b; b = !true; } }")
        assert result.ok
        assert unparse(result.program) == dedent("""\
            int x;
            void f(int a) {
                x(int) = (a(int) + 1);
                if ((a(int) > 0)) {
                    bool b;
                    b(bool) = (!true);
                }
            }

        """)

    def test_calls_show_return_type_and_signature(self):
        result = analyze_source("int g(int a, bool b) { return a; }\nvoid f() { g(1, true); }")
        assert result.ok
        assert "    g(int)(int,bool->int)(1, true);" in unparse(result.program).splitlines()

    def test_dot_access_annotations(self):
        result = analyze_source("struct P { int x; };\nstruct P p;\nvoid f() { p.x = 1; }")
        assert result.ok
        assert "    (p(P)).x(int) = 1;" in unparse(result.program).splitlines()

    def test_unresolved_names_stay_bare(self):
        result = analyze_source("int x;\nvoid f() { x = nope; }")
        assert not result.ok
        assert "    x(int) = nope;" in unparse(result.program).splitlines()

    def test_annotation_can_be_disabled(self):
        result = analyze_source("int x;\nvoid f() { x = 1; }")
        assert "    x = 1;" in unparse(result.program, annotate=False).splitlines()

    def test_fixture_annotations(self):
        result = analyze_source((FIXTURES / "valid.moo").read_text())
        lines = unparse(result.program).splitlines()
        assert "    cin >> count(int);" in lines
        assert "        count(int) = length(int)(Segment,int->int)(seg(Segment), i(int));" in lines
        assert "        ((seg(Segment)).start(Point)).x(int) = (((seg(Segment)).end(Point)).y(int) = 3);" in lines
        assert '        cout << "hidden\\n";' in lines
