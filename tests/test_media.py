from clipfetch.media import (
    Data,
    DataType,
    Part,
    Stream,
    URLParseError,
    empty_data,
    print_info,
    print_stream_info,
    sorted_streams,
)

DOUYIN_URL = "https://aweme.snssdk.com/aweme/v1/playwm/?video_id=v0200f9a0000bc117isuatl67cees890&line=0"
MIAOPAI_URL = "https://txycdn.miaopai.com/stream/clip.mp4"


def test_sorted_streams_largest_first():
    streams = {"a": Stream(size=10), "b": Stream(size=30), "c": Stream(size=20)}
    assert [s.size for s in sorted_streams(streams)] == [30, 20, 10]


def test_fill_up_streams_sets_missing_fields():
    parts = [Part(DOUYIN_URL, 4927877, "mp4"), Part(MIAOPAI_URL, 4011590, "mp4")]
    data = Data(title="test", streams={"default": Stream(parts=parts)})
    data.fill_up_streams()
    stream = data.streams["default"]
    assert stream.id == "default"
    assert stream.size == 4927877 + 4011590
    assert stream.ext == "mp4"


def test_fill_up_streams_keeps_given_values():
    stream = Stream(id="hd", parts=[Part(DOUYIN_URL, 5, "ts")], size=99, ext="mp4")
    data = Data(streams={"other": stream})
    data.fill_up_streams()
    assert (stream.id, stream.size, stream.ext) == ("hd", 99, "mp4")


def test_empty_data_records_error():
    error = URLParseError()
    data = empty_data("https://www.douyin.com", error)
    assert data.error is error
    assert data.url == "https://www.douyin.com"
    assert data.streams == {}


def test_url_parse_error_message():
    error = URLParseError()
    assert isinstance(error, ValueError)
    assert "url parse failed" in str(error)


def test_print_info_lists_streams_by_size(capsys):
    data = Data(
        site="douyin",
        title="test2",
        type=DataType.VIDEO,
        streams={
            "sd": Stream(id="sd", size=1024, quality="low"),
            "hd": Stream(id="hd", size=1048576),
        },
    )
    print_info(data, sorted_streams(data.streams))
    out = capsys.readouterr().out
    assert "test2" in out
    assert "video" in out
    assert "# All available quality" in out
    assert "1.00 MiB (1048576 Bytes)" in out
    assert out.index("[hd]") < out.index("[sd]")
    assert "low" in out


def test_print_stream_info_shows_one_stream(capsys):
    stream = Stream(id="default", size=56107)
    data = Data(site="bcy", title="bcy image test", type=DataType.IMAGE,
                streams={"default": stream})
    print_stream_info(data, stream)
    out = capsys.readouterr().out
    assert "bcy image test" in out
    assert "[default]" in out
    assert "# All available quality" not in out