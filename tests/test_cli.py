import pytest

from gibbslda.cli import build_parser, main, make_config
from gibbslda.persistence import read_others

from conftest import write_documents


def test_est_arguments():
    args = build_parser().parse_args(["est", "-dfile", "docs.dat", "-ntopics", "5", "-alpha", "0.2",
                                      "-niters", "10", "-savestep", "0", "-twords", "3", "--seed", "4"])
    config = make_config(args)

    assert args.mode == "est"
    assert config.dfile == "docs.dat"
    assert config.n_topics == 5
    assert config.alpha == 0.2
    assert config.niters == 10
    assert config.savestep == 0
    assert config.twords == 3
    assert config.seed == 4


def test_inf_arguments():
    args = build_parser().parse_args(["inf", "-dir", "models", "-model", "model-00100",
                                      "-dfile", "new.dat", "-withrawdata"])
    config = make_config(args)

    assert config.directory == "models"
    assert config.model_name == "model-00100"
    assert config.raw_text is True
    assert config.alpha is None


def test_mode_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_est_then_estc(model_dir):
    assert main(["est", "-dir", str(model_dir), "-dfile", "trndocs.dat", "-ntopics", "3",
                 "-niters", "3", "-savestep", "0", "--seed", "1"]) == 0
    assert read_others(model_dir / "model-final.others").liter == 3

    assert main(["estc", "-dir", str(model_dir), "-model", "model-final", "-niters", "2",
                 "-savestep", "0", "--seed", "2"]) == 0
    info = read_others(model_dir / "model-final.others")
    assert info.liter == 5
    assert info.n_topics == 3


def test_missing_model_exits_nonzero(tmp_path, caplog):
    assert main(["estc", "-dir", str(tmp_path), "-model", "missing"]) == 1
    assert "missing.others" in caplog.text


def test_malformed_document_file_exits_nonzero(tmp_path):
    (tmp_path / "trndocs.dat").write_text("five\n")

    assert main(["est", "-dir", str(tmp_path), "-dfile", "trndocs.dat", "-niters", "1"]) == 1


def test_negative_document_count_exits_nonzero(tmp_path):
    (tmp_path / "trndocs.dat").write_text("-1\n")

    assert main(["est", "-dir", str(tmp_path), "-dfile", "trndocs.dat", "-niters", "1"]) == 1


def test_zero_topics_exits_nonzero(model_dir):
    assert main(["est", "-dir", str(model_dir), "-dfile", "trndocs.dat", "-ntopics", "0", "-niters", "1"]) == 1


def test_negative_word_id_exits_nonzero(model_dir):
    assert main(["est", "-dir", str(model_dir), "-dfile", "trndocs.dat", "-ntopics", "2",
                 "-niters", "1", "-savestep", "0", "--seed", "1"]) == 0
    with open(model_dir / "wordmap.txt", "a") as out:
        print("zebra -1", file=out)
    write_documents(model_dir / "newdocs.dat", ["zebra"])

    assert main(["inf", "-dir", str(model_dir), "-model", "model-final", "-dfile", "newdocs.dat",
                 "-niters", "1"]) == 1


def test_inference_takes_no_trainlog():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["inf", "-model", "model-final", "-dfile", "new.dat", "--trainlog"])
