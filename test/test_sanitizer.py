"""
Test cases for input sanitization.
"""
import pytest

from subtrack.security.errors import InvalidUrlError
from subtrack.security.sanitizer import (
    escape_html,
    sanitize_deep,
    sanitize_email,
    sanitize_text,
    sanitize_url,
)


class TestSanitizeText:
    """Test cases for free-text sanitization."""

    def test_removes_script_tags(self):
        """Test tags are stripped and the text between them kept."""
        assert sanitize_text('<script>alert("xss")</script>Hello') == 'alert("xss")Hello'

    def test_removes_javascript_protocol(self):
        """Test javascript: is removed case-insensitively."""
        assert sanitize_text('JavaScript:alert(1)') == 'alert(1)'

    def test_removes_event_handlers(self):
        """Test on<word>= handler attributes are removed."""
        assert sanitize_text('onclick=steal() hi') == 'steal() hi'
        assert sanitize_text('ONMOUSEOVER=x') == 'x'

    def test_plain_text_only_trimmed(self):
        """Test text without unsafe patterns comes back trimmed."""
        assert sanitize_text('  Netflix Premium  ') == 'Netflix Premium'
        assert sanitize_text('Tom & Jerry = 2') == 'Tom & Jerry = 2'

    def test_none_and_empty(self):
        """Test None and empty input give an empty string."""
        assert sanitize_text(None) == ''
        assert sanitize_text('') == ''
        assert sanitize_text('   ') == ''

    def test_non_string_converted(self):
        """Test non-string values are converted before sanitizing."""
        assert sanitize_text(42) == '42'

    def test_reassembled_patterns_removed(self):
        """Test fragments that form a pattern after one removal are caught."""
        assert sanitize_text('javajavascript:script:alert(1)') == 'alert(1)'
        assert sanitize_text('oonclick=nclick=x') == 'x'

    def test_brackets_in_plain_text_kept(self):
        """Test comparisons and arrows survive when nothing unsafe was found."""
        assert sanitize_text('5 > 3') == '5 > 3'
        assert sanitize_text(' a <= b ') == 'a <= b'
        assert sanitize_text('<-- back') == '<-- back'

    def test_stray_brackets_removed_with_tags(self):
        """Test leftovers of a broken tag go once a tag was stripped."""
        assert sanitize_text('<b>bold</b> <script') == 'bold script'
        assert sanitize_text('javascript:x > y') == 'x  y'

    def test_null_bytes_removed(self):
        """Test null bytes are dropped."""
        assert sanitize_text('ab\x00c') == 'abc'

    @pytest.mark.parametrize('value', [
        '<img src=x onerror=alert(1)>',
        'javajavascript:script:',
        '  <<b>>onload==javascript:x  ',
        '<a href="javascript:void(0)">click</a>',
        'plain text',
    ])
    def test_idempotent(self, value):
        """Test sanitizing twice gives the same result as once."""
        once = sanitize_text(value)
        assert sanitize_text(once) == once

    def test_logs_injection_attempt(self, caplog):
        """Test stripped input is reported on the security logger."""
        with caplog.at_level('WARNING', logger='subtrack.security'):
            sanitize_text('<script>x</script>')
        assert 'Potential XSS injection' in caplog.text


class TestSanitizeEmail:
    """Test cases for email normalization."""

    def test_lowercases_and_trims(self):
        """Test email is lower-cased and trimmed."""
        assert sanitize_email('  Jane.Doe@Example.COM ') == 'jane.doe@example.com'

    def test_none(self):
        """Test None gives an empty string."""
        assert sanitize_email(None) == ''


class TestEscapeHtml:
    """Test cases for HTML escaping."""

    def test_escapes_markup(self):
        """Test markup characters are escaped."""
        assert escape_html('<b>"Tom" & \'Jerry\'</b>') == (
            '&lt;b&gt;&quot;Tom&quot; &amp; &#x27;Jerry&#x27;&lt;/b&gt;'
        )

    def test_none(self):
        """Test None gives an empty string."""
        assert escape_html(None) == ''


class TestSanitizeUrl:
    """Test cases for URL validation and normalization."""

    def test_valid_url_unchanged(self):
        """Test an already-normal URL round-trips exactly."""
        assert sanitize_url('https://example.com/path?x=1') == 'https://example.com/path?x=1'

    def test_normalizes_scheme_host_and_port(self):
        """Test scheme/host are lower-cased and default ports dropped."""
        assert sanitize_url('HTTPS://Example.COM:443/Path') == 'https://example.com/Path'
        assert sanitize_url('http://example.com:80') == 'http://example.com/'

    def test_keeps_non_default_port(self):
        """Test a non-default port is kept."""
        assert sanitize_url('http://example.com:8080/a') == 'http://example.com:8080/a'

    def test_empty_path_becomes_slash(self):
        """Test an empty path is normalized to '/'."""
        assert sanitize_url('https://example.com') == 'https://example.com/'

    def test_international_host(self):
        """Test IDN hosts are converted to their ASCII form."""
        assert sanitize_url('https://bücher.de/') == 'https://xn--bcher-kva.de/'

    def test_ipv6_host(self):
        """Test IPv6 literal hosts keep their brackets."""
        assert sanitize_url('http://[::1]:8000/') == 'http://[::1]:8000/'

    def test_empty_input(self):
        """Test empty input gives an empty string."""
        assert sanitize_url('') == ''
        assert sanitize_url(None) == ''

    @pytest.mark.parametrize('url', [
        'javascript:alert(1)',
        'ftp://example.com/file',
        'data:text/html,<script>alert(1)</script>',
        'not a url',
        'example.com/path',
        'https://',
        'https://exa mple.com/',
        'https://example.com/<script>',
        'https://example.com:99999/',
        'https://-bad-.com/',
    ])
    def test_invalid_urls_raise(self, url):
        """Test malformed or non-http(s) URLs raise InvalidUrlError."""
        with pytest.raises(InvalidUrlError):
            sanitize_url(url)

    def test_invalid_url_is_value_error(self):
        """Test InvalidUrlError can be caught as ValueError."""
        with pytest.raises(ValueError):
            sanitize_url('mailto:someone@example.com')


class TestSanitizeDeep:
    """Test cases for nested structure sanitization."""

    def test_sanitizes_nested_strings(self):
        """Test strings at every depth are sanitized and other values kept."""
        data = {
            'name': '<b>Netflix</b>',
            'price': 15.99,
            'active': True,
            'notes': None,
            'tags': ['<i>video</i>', 'streaming', 3],
            'owner': {'email': 'onclick=x@example.com'},
        }
        assert sanitize_deep(data) == {
            'name': 'Netflix',
            'price': 15.99,
            'active': True,
            'notes': None,
            'tags': ['video', 'streaming', 3],
            'owner': {'email': 'x@example.com'},
        }

    def test_keys_unchanged(self):
        """Test dictionary keys are not sanitized."""
        assert sanitize_deep({'<k>': '<v>x</v>'}) == {'<k>': 'x'}

    def test_input_not_mutated(self):
        """Test the input structure is left untouched."""
        data = {'a': ['<b>x</b>'], 'b': {'c': '<i>y</i>'}}
        sanitize_deep(data)
        assert data == {'a': ['<b>x</b>'], 'b': {'c': '<i>y</i>'}}

    def test_preserves_tuples(self):
        """Test tuples come back as tuples, including nested ones."""
        result = sanitize_deep(('<b>a</b>', ['<i>b</i>', ('<u>c</u>',)]))
        assert result == ('a', ['b', ('c',)])
        assert isinstance(result, tuple)
        assert isinstance(result[1][1], tuple)

    def test_scalars_pass_through(self):
        """Test top-level scalars and strings are handled."""
        assert sanitize_deep(7) == 7
        assert sanitize_deep(None) is None
        assert sanitize_deep('<b>x</b>') == 'x'

    def test_deep_nesting_without_recursion_limit(self):
        """Test nesting far beyond the recursion limit is handled."""
        data = '<b>leaf</b>'
        for _ in range(5000):
            data = [data]
        result = sanitize_deep(data)
        for _ in range(5000):
            assert isinstance(result, list) and len(result) == 1
            result = result[0]
        assert result == 'leaf'

    def test_shared_containers_copied_once(self):
        """Test a container referenced twice maps to a single copy."""
        shared = ['<b>x</b>']
        result = sanitize_deep({'a': shared, 'b': shared})
        assert result == {'a': ['x'], 'b': ['x']}
        assert result['a'] is result['b']

    def test_shared_tuples(self):
        """Test a tuple referenced twice is rebuilt in both places."""
        shared = ('<b>x</b>',)
        result = sanitize_deep([shared, {'t': shared}])
        assert result == [('x',), {'t': ('x',)}]

    def test_cyclic_list(self):
        """Test a self-referencing list does not loop forever."""
        data = ['<b>x</b>']
        data.append(data)
        result = sanitize_deep(data)
        assert result[0] == 'x'
        assert result[1] is result
