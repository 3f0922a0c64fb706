import os
import zipfile
import xml.etree.ElementTree as ET
import md2doc

SAMPLE_MD = """
# Test Lists and Quotes

Some **bold** and *italic* text with `code` & 1 < 2 > 0.

1. a
2. b
   1. nested
3. c

> quoted *text*

```python
print("hello")

print("world")
```
"""

OUTPUT_FILE = "test_output.docx"
NS_W = md2doc.runs.NS_W


def verify():
    print("Starting conversion...")
    md2doc.convert_markdown_to_docx(SAMPLE_MD, OUTPUT_FILE)

    if not os.path.exists(OUTPUT_FILE):
        print("Error: Output file not generated.")
        return

    print(f"File generated: {OUTPUT_FILE}")

    # Check contents of DOCX (ZIP)
    with open(OUTPUT_FILE, 'rb') as f:
        parts = md2doc.read_package(f.read())
    print("Parts:", ", ".join(sorted(parts)))

    print("\n--- Verifying Package Consistency ---")
    try:
        md2doc.check_package(parts)
        print("SUCCESS: every relationship and content type resolves")
    except md2doc.AssemblyError as e:
        print(f"FAILURE: {e}")

    print("\n--- Verifying Body ---")
    body = ET.fromstring(parts['word/document.xml']).find(f'{{{NS_W}}}body')
    for para in body.findall(f'{{{NS_W}}}p'):
        text = ''.join(t.text or '' for t in para.iter(f'{{{NS_W}}}t'))
        print(repr(text))

    with zipfile.ZipFile(OUTPUT_FILE) as z:
        if '1 &lt; 2 &gt; 0' in z.read('word/document.xml').decode('utf-8'):
            print("SUCCESS: markup characters escaped")
        else:
            print("FAILURE: markup characters not escaped")


if __name__ == "__main__":
    verify()
