from bs4 import BeautifulSoup


def extract_audio_source(html: str) -> str | None:
    """Find the challenge audio URL in the challenge frame's HTML."""
    soup = BeautifulSoup(html, 'html.parser')

    # 1. <audio id="audio-source" src="...">
    audio = soup.find(id='audio-source')
    if audio is not None and audio.get('src'):
        return audio['src']

    # 2. "Download audio as MP3" link
    link = soup.select_one('a.rc-audiochallenge-tdownload-link')
    if link is not None and link.get('href'):
        return link['href']

    # 3. any <source> inside an audio element
    source = soup.select_one('audio source[src]')
    if source is not None:
        return source['src']

    return None
