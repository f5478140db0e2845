from lectures.nodes import ListType, Node, NodeType, TableRow


def _sample_tree():
    leaf_a = Node(NodeType.PARAGRAPH, content="a")
    nested = Node(NodeType.LIST_ITEM, content="nested", depth=1)
    item = Node(NodeType.LIST_ITEM, content="item", children=[nested])
    section = Node(NodeType.SECTION, title="sec", level=2, children=[leaf_a, item])
    tail = Node(NodeType.PARAGRAPH, content="tail")
    return Node(NodeType.DOCUMENT, children=[section, tail])


def test_walk_is_preorder():
    root = _sample_tree()
    labels = [node.title or node.content for node in root.walk()]
    assert labels == ["", "sec", "a", "item", "nested", "tail"]


def test_walk_starts_with_self_and_counts_all_nodes():
    root = _sample_tree()
    nodes = list(root.walk())
    assert nodes[0] is root
    assert len(nodes) == 6


def test_walk_of_leaf_yields_only_leaf():
    table = Node(
        NodeType.TABLE,
        rows=[TableRow(cells=["A", "B"], is_header=True), TableRow(cells=["1", "2"])],
    )
    assert list(table.walk()) == [table]


def test_default_lists_are_not_shared():
    first = Node(NodeType.PARAGRAPH)
    second = Node(NodeType.PARAGRAPH)
    first.children.append(Node(NodeType.PARAGRAPH, content="x"))
    first.source_pages.append(3)
    assert second.children == []
    assert second.source_pages == []


def test_node_type_values_round_trip():
    for node_type in NodeType:
        assert NodeType(node_type.value) is node_type
    assert NodeType("display_equation") is NodeType.DISPLAY_EQUATION
    assert ListType("ordered") is ListType.ORDERED


def test_node_type_compares_with_plain_string():
    node = Node(NodeType.LIST_ITEM, list_type=ListType.UNORDERED)
    assert node.type == "list_item"
    assert node.list_type == "unordered"


def test_table_row_defaults():
    row = TableRow(cells=["only"])
    assert row.is_header is False
    assert row.cells == ["only"]