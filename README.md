# clipfetch

clipfetch is a library that finds the media behind a page on a video or image site
and downloads it.

A site extractor reads the page and returns a list of `clipfetch.media.Data` records.
Each record has a `streams` dict of `Stream` objects, one for each available quality,
and every stream is made of one or more `Part`s. `clipfetch.downloader.Downloader`
then fetches the stream you pick.

## Supported sites

| Site key (`clipfetch.registry.EXTRACTORS`) | Extractor |
|---|---|
| `acfun` | `clipfetch.sites.acfun.AcfunExtractor` (bangumi episodes, with playlists) |
| `bcy` | `clipfetch.sites.bcy.BcyExtractor` |
| `douyin`, `iesdouyin` | `clipfetch.sites.douyin.DouyinExtractor` (videos and image posts, `v.douyin.com` short links) |
| `douyu` | `clipfetch.sites.douyu.DouyuExtractor` (recorded videos only, not live rooms) |
| `eporner` | `clipfetch.sites.eporner.EpornerExtractor` |
| `facebook` | `clipfetch.sites.facebook.FacebookExtractor` |
| `geekbang` | `clipfetch.sites.geekbang.GeekbangExtractor` (the course must have been bought) |
| `haokan` | `clipfetch.sites.haokan.HaokanExtractor` |
| `hupu` | `clipfetch.sites.hupu.HupuExtractor` |
| `huya` | `clipfetch.sites.huya.HuyaExtractor` |
| `instagram` | `clipfetch.sites.instagram.InstagramExtractor` |
| `iqiyi`, `iq` | `clipfetch.sites.iqiyi.IqiyiExtractor` with `SiteType.IQIYI` or `SiteType.IQ` |
| `mgtv` | `clipfetch.sites.mgtv.MgtvExtractor` |
| `miaopai` | `clipfetch.sites.miaopai.MiaopaiExtractor` |
| `163` | `clipfetch.sites.netease.NeteaseExtractor` (NetEase Music MVs and videos) |
| `pixivision` | `clipfetch.sites.pixivision.PixivisionExtractor` |

`clipfetch.registry.resolve(url)` returns the site key and the URL to extract from.
The key is the registrable part of the host name, so `www.mgtv.com` gives `mgtv`.
The one exception is `haokan.baidu.com`, which gives `haokan`. Bilibili short links
such as `av…`, `BV…` and `ep…` are expanded to full bilibili URLs under the key
`bilibili`. `clipfetch.registry.extract(url, options)` runs the extractor for the key,
then fills in the id, size and extension of any stream that the extractor left empty.

## Usage

```python
from clipfetch.downloader import Downloader, DownloadOptions
from clipfetch.media import ExtractOptions, print_info, sorted_streams
from clipfetch.registry import extract

videos = extract("https://haokan.baidu.com/v?vid=10057409468467026969", ExtractOptions())

for data in videos:
    # Every stream, largest first.
    print_info(data, sorted_streams(data.streams))

    # Download the default stream, which is the largest one.
    Downloader(DownloadOptions(output_path="downloads")).download(data)
```

You can also call an extractor directly, for example
`AcfunExtractor().extract(url, ExtractOptions(playlist=True, items="1,3-5"))`.

### Extraction options

`ExtractOptions` has these fields: `playlist`, `items`, `item_start`, `item_end`,
`thread_number` and `cookie`. Only the AcFun extractor reads the playlist fields.
`items` takes a comma separated list of positions and ranges, such as `"1,3-5"`. When
`items` is empty, the range from `item_start` to `item_end` is used, and an `item_end`
of 0 means the last item. `clipfetch.siteutil.need_download_list` does this
selection. None of the extractors sends `cookie`.

### Download options

`DownloadOptions` has these fields:

- `info_only` prints every stream and downloads nothing.
- `silent` turns off the stream summary and the progress bar.
- `stream` picks a stream by its id. The default is the largest stream.
- `output_path` must be a directory that already exists.
- `output_name` and `file_name_length` set the file name, with optional truncation.
- `caption` downloads the captions attached to a `Data` record.
- `multi_thread` splits a single-part stream into `thread_number` pieces and fetches
  them in parallel. Each piece is kept in its own part file, whose header is a
  `clipfetch.parts.FilePartMeta`. An interrupted piece resumes where it stopped.
- `thread_number` limits how many parts or pieces are fetched at the same time.
- `retry_times` sets how many attempts are made. After each failed attempt, the
  transfer resumes from the last byte it received.
- `chunk_size_mb` makes transfers use ranged requests of this many MiB.
- `use_aria2_rpc`, `aria2_token`, `aria2_method` and `aria2_addr` send every part to an
  aria2 JSON-RPC server (`aria2.addUri`) instead of downloading it.

A single-part download first goes to a `.download` file, so it can be resumed, and is
then renamed. If the final file already exists, the download is skipped. When a video
stream has several parts, they are saved as `title[0].ext`, `title[1].ext` and so on.
They are then joined byte for byte into one file by `clipfetch.downloader.merge_files`.

## Errors

Failures are raised as exceptions:

- A page that does not hold the expected data raises `clipfetch.media.URLParseError`,
  which is a subclass of `ValueError`.
- Other site refusals raise `ValueError`. Examples are a live douyu room, a geekbang
  course that has not been bought, and an iqiyi video that cannot be played.
- HTTP failures come from `requests`.

## Helpers

- `clipfetch.siteutil.match_one_of` tries several regular expressions in turn and
  returns the first match, as the full match followed by its groups.
  `clipfetch.siteutil.match_all` returns every match.
- `clipfetch.siteutil.get_name_and_ext` splits the file name of a URL. If the path
  has no extension, it asks the server for the `Content-Type` and uses that instead.
- `clipfetch.siteutil.file_name` and `file_path` build safe file names and paths.
- `clipfetch.parts.FilePartMeta.to_bytes` and `from_bytes` encode and decode the part
  file header.
- `clipfetch.fetch` sends requests with desktop-browser headers.
  `content_size` reads a URL's `Content-Length`.

## What it does not do

- There is no command-line program. clipfetch is used as a library. The
  `# download with:` line that `print_info` prints only shows the id to pass as
  `DownloadOptions.stream`.
- There is no extractor for bilibili or for unlisted sites. `registry.extract` raises
  `ValueError("unsupported site: …")` for such URLs, including expanded bilibili short
  links.
- Segments are never remuxed. Multi-part videos are joined by plain concatenation.
- Cookies are not read from a browser.

## Running the tests

Install the package with its `test` extra, then run `pytest` from the project root.