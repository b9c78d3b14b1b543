import pytest
from sqlalchemy import func, select

from kebab.cli import build_parser, main
from kebab.config import Settings
from kebab.db import Board, ColumnModel, Task, make_engine, make_session_factory
from kebab.seed import SAMPLE_BOARD_TITLE, SAMPLE_COLUMNS, SAMPLE_TASKS
from kebab.storage import BoardStore


@pytest.fixture
def settings(tmp_path):
    return Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'kebab.db'}")


def counts(settings):
    engine = make_engine(settings.DATABASE_URL)
    try:
        with make_session_factory(engine)() as session:
            return tuple(
                session.scalar(select(func.count()).select_from(model)) for model in (Board, ColumnModel, Task)
            )
    finally:
        engine.dispose()


def test_init_db_creates_empty_tables(settings):
    assert main(["init-db"], settings=settings) == 0
    assert counts(settings) == (0, 0, 0)


def test_seed_inserts_sample_board(settings):
    assert main(["seed"], settings=settings) == 0
    assert counts(settings) == (1, len(SAMPLE_COLUMNS), len(SAMPLE_TASKS))

    engine = make_engine(settings.DATABASE_URL)
    with make_session_factory(engine)() as session:
        store = BoardStore(session)
        board = store.list_boards()[0]
        aggregate = store.get_board_detail(board.id)
    engine.dispose()

    assert board.title == SAMPLE_BOARD_TITLE
    assert [c.column.title for c in aggregate.columns] == ["To Do", "In Progress", "Done"]
    assert [t.title for t in aggregate.columns[0].tasks] == [
        "Setup project repository",
        "Design database schema",
    ]
    assert [t.order for t in aggregate.columns[1].tasks] == [0, 1]


def test_reset_removes_everything(settings):
    main(["seed"], settings=settings)
    main(["seed"], settings=settings)

    assert main(["reset"], settings=settings) == 0
    assert counts(settings) == (0, 0, 0)


def test_serve_options():
    args = build_parser().parse_args(["serve", "--port", "8123", "--reload"])
    assert args.port == 8123
    assert args.reload is True
    assert args.host is None


def test_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
