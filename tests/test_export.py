import json

import pytest

from builders import call_stmt, function, ident, if_, lit, program, return_, var

from esflow import (
    CFGDriver,
    InvalidInputError,
    export_as_dot,
    export_as_json,
    export_as_object,
    export_program,
    parse,
)
from esflow.utils.postprocessor import networkx_to_json, write_networkx_to_json, write_to_dot


def test_dot_export():
    flow_program = parse(program(var("foo", lit(42))))

    assert export_as_dot(flow_program.flow_graph) == "\n".join(
        [
            "digraph control_flow_graph {",
            '    1 -> 4 [ label = "foo = 42" ]',
            "}",
        ]
    )


def test_dot_export_escapes_quotes():
    flow_program = parse(program(var("s", lit("a"))))

    assert '[ label = "s = \\"a\\"" ]' in export_as_dot(flow_program.flow_graph)


def test_dot_export_of_empty_program():
    assert export_as_dot(parse(program()).flow_graph) == "digraph control_flow_graph {\n}"


def test_json_export():
    flow_program = parse(program(var("foo", lit(42))))

    assert json.loads(export_as_json(flow_program)) == {
        "nodes": [{"id": 1, "type": "Entry"}, {"id": 4, "type": "Normal"}],
        "edges": [{"from": 1, "to": 4, "type": "Normal"}],
    }


def test_object_export_contains_functions():
    flow_program = parse(program(function("f", [], return_(ident("x"))), call_stmt("f")))

    exported = export_as_object(flow_program)

    # Ids 4 to 6 belong to the graph of f
    assert exported["program"]["flowGraph"]["edges"] == [
        {"from": 1, "to": 7, "type": "Normal", "label": "f()"}
    ]

    [func] = exported["functions"]
    assert func["id"] == 1
    assert func["name"] == "f"
    assert func["flowGraph"]["edges"][0]["label"] == "return x"
    assert func["flowGraph"]["edges"][0]["type"] == "AbruptCompletion"
    assert {node["type"] for node in func["flowGraph"]["nodes"]} == {"Entry", "SuccessExit"}


@pytest.mark.parametrize("format", ["dot", "DOT", " dot "])
def test_export_program_dot(format):
    flow_program = parse(program(var("foo", lit(42))))

    assert export_program(flow_program, format) == export_as_dot(flow_program.flow_graph)


def test_export_program_json():
    flow_program = parse(program(var("foo", lit(42))))

    assert export_program(flow_program, "json") == export_as_json(flow_program)


@pytest.mark.parametrize("format", ["", None, "xml"])
def test_export_program_rejects_unknown_format(format):
    with pytest.raises(InvalidInputError):
        export_program(parse(program()), format)


def test_networkx_view():
    flow_program = parse(program(if_(ident("x"), call_stmt("f"))))

    graph = flow_program.flow_graph.to_networkx()

    assert graph.number_of_nodes() == len(flow_program.flow_graph.nodes)
    assert graph.number_of_edges() == len(flow_program.flow_graph.edges)
    assert graph.nodes[1]["type"] == "Entry"
    labels = {data["label"] for _, _, data in graph.edges(data=True)}
    assert labels == {"x", "!x", "f()"}

    graph_json = networkx_to_json(graph)
    assert len(graph_json["nodes"]) == graph.number_of_nodes()


def test_write_networkx_to_json(tmp_path, monkeypatch):
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    graph = parse(program(var("a", lit(1)))).flow_graph.to_networkx()
    output = tmp_path / "cfg.json"

    graph_json = write_networkx_to_json(graph, str(output))

    assert json.loads(output.read_text()) == json.loads(json.dumps(graph_json))


def test_file_writers_are_skipped_on_ci(tmp_path, monkeypatch):
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    graph = parse(program(var("a", lit(1)))).flow_graph.to_networkx()

    write_networkx_to_json(graph, str(tmp_path / "cfg.json"))
    write_to_dot(graph, str(tmp_path / "cfg.dot"))

    assert list(tmp_path.iterdir()) == []


def test_driver_writes_json_and_dot(tmp_path, monkeypatch):
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    output = tmp_path / "cfg.json"

    driver = CFGDriver(program(var("s", lit("a ? b : c"))), output_file=str(output))

    assert output.exists()
    dot_text = (tmp_path / "cfg.dot").read_text()
    assert "digraph" in dot_text
    assert driver.graph.number_of_edges() == 1
    assert driver.json["directed"] is True
