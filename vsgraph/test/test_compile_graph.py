import pytest

from vsgraph.compiler import (
    CompileError,
    CompileOptions,
    CycleError,
    ValidationError,
    ValidationReason,
    compile_graph,
    schedule,
)
from vsgraph.core.GraphPrimitives import Connection
from vsgraph.core.Node import FilterNode, OutputNode, SourceNode, connect
from vsgraph.noderegistry.NodeRegistry import create_filter_node


@pytest.fixture
def chain():
    """Linear chain: Source A, Filter B, Output C."""
    a = SourceNode.create(title="A", file_path="a.mkv", node_id="A")
    b = create_filter_node("resize", node_id="B").with_parameter("width", "1280")
    c = OutputNode.create(title="C", output_index=0, node_id="C")
    return a, b, c


class TestValidation:

    def test_no_source_node(self):
        with pytest.raises(ValidationError) as info:
            compile_graph([OutputNode.create()], [])
        assert info.value.reason == ValidationReason.NO_SOURCE_NODE
        assert "source node" in str(info.value)

    def test_no_output_node(self):
        with pytest.raises(ValidationError) as info:
            compile_graph([SourceNode.create(file_path="x.mkv")], [])
        assert info.value.reason == ValidationReason.NO_OUTPUT_NODE
        assert "output node" in str(info.value)

    def test_empty_graph_reports_missing_source(self):
        with pytest.raises(ValidationError) as info:
            compile_graph([], [])
        assert info.value.reason == ValidationReason.NO_SOURCE_NODE

    def test_errors_share_a_base(self):
        assert issubclass(ValidationError, CompileError)
        assert issubclass(CycleError, CompileError)
        assert issubclass(CompileError, ValueError)


class TestEndToEnd:

    def test_linear_pipeline(self, chain):
        a, b, c = chain
        conns = [connect(a, b), connect(b, c)]
        assert [n.id for n in schedule([a, b, c], conns)] == ["A", "B", "C"]

        script = compile_graph([a, b, c], conns)
        lines = script.splitlines()
        src_line = lines.index('clip0 = core.ffms2.Source(r"a.mkv")')
        flt_line = lines.index("clip1 = core.resize.Lanczos(clip0, width=1280)")
        out_line = lines.index("clip1.set_output(0)")
        assert src_line < flt_line < out_line

    def test_missing_output_connection_falls_back(self, chain):
        a, b, c = chain
        script = compile_graph([a, b, c], [connect(a, b)])
        assert "clip.set_output(0)" in script
        assert "clip1.set_output(0)" not in script

    def test_validation_before_cycle(self):
        x = FilterNode.create("X", "std", "X", node_id="X")
        y = FilterNode.create("Y", "std", "Y", node_id="Y")
        with pytest.raises(ValidationError) as info:
            compile_graph([x, y], [connect(x, y), connect(y, x)])
        assert info.value.reason == ValidationReason.NO_SOURCE_NODE

    def test_disconnected_filter_is_appended(self):
        a = SourceNode.create(title="A", file_path="a.mkv", node_id="A")
        c = OutputNode.create(title="C", node_id="C")
        d = create_filter_node("cas", node_id="D")
        conns = [connect(a, c)]
        assert [n.id for n in schedule([a, c, d], conns)] == ["A", "C", "D"]

        script = compile_graph([a, c, d], conns)
        assert script.index("clip0.set_output(0)") < script.index("# Filter: CAS Sharpen")
        assert "clip2 = core.cas.CAS(clip)" in script


class TestCompileProperties:

    def test_cycle_fails_without_output(self, chain):
        a, _, c = chain
        x = FilterNode.create("X", "std", "X", node_id="X")
        y = FilterNode.create("Y", "std", "Y", node_id="Y")
        conns = [connect(a, c), connect(x, y), connect(y, x)]
        for _ in range(3):
            with pytest.raises(CycleError) as info:
                compile_graph([a, c, x, y], conns)
            assert info.value.node.id == "X"

    def test_compiling_twice_is_byte_identical(self, chain):
        a, b, c = chain
        extra = create_filter_node("crop", node_id="E", apply_defaults=True)
        out2 = OutputNode.create(title="C2", output_index=1, node_id="C2")
        nodes = [c, extra, out2, b, a]
        conns = [connect(a, b), connect(b, c), connect(a, extra), connect(extra, out2)]
        assert compile_graph(nodes, conns) == compile_graph(nodes, conns)

    def test_inputs_are_not_mutated(self, chain):
        a, b, c = chain
        nodes = [a, b, c]
        conns = [connect(a, b), connect(b, c)]
        before = (list(nodes), list(conns))
        compile_graph(nodes, conns)
        assert (nodes, conns) == before


class TestStrictPolicy:

    def test_permissive_by_default(self, chain):
        a, b, c = chain
        conns = [connect(a, c), connect(b, c)]
        script = compile_graph([a, b, c], conns)
        assert "clip0.set_output(0)" in script

    def test_multiple_connections_to_one_input(self, chain):
        a, b, c = chain
        conns = [connect(a, b), connect(a, c), connect(b, c)]
        with pytest.raises(ValidationError) as info:
            compile_graph([a, b, c], conns, CompileOptions(strict=True))
        assert info.value.reason == ValidationReason.MULTIPLE_INPUT_CONNECTIONS

    def test_unconnected_input(self, chain):
        a, b, c = chain
        with pytest.raises(ValidationError) as info:
            compile_graph([a, b, c], [connect(a, b)], CompileOptions(strict=True))
        assert info.value.reason == ValidationReason.UNRESOLVED_INPUT
        assert "'C'" in str(info.value)

    def test_unsourced_connection(self, chain):
        a, _, c = chain
        conns = [Connection.create(None, c.inputs[0])]
        with pytest.raises(ValidationError) as info:
            compile_graph([a, c], conns, CompileOptions(strict=True))
        assert info.value.reason == ValidationReason.UNRESOLVED_INPUT

    def test_well_formed_graph_passes(self, chain):
        a, b, c = chain
        conns = [connect(a, b), connect(b, c)]
        strict = compile_graph([a, b, c], conns, CompileOptions(strict=True))
        assert strict == compile_graph([a, b, c], conns)

    def test_basic_checks_still_come_first(self):
        with pytest.raises(ValidationError) as info:
            compile_graph([OutputNode.create()], [], CompileOptions(strict=True))
        assert info.value.reason == ValidationReason.NO_SOURCE_NODE
