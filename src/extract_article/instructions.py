URL_EXTRACTION_INSTRUCTIONS = """
You are a web content extraction system. You will be given the HTML of a web article and the URL it came from.
Return a single JSON object describing the article with these fields:

title: the main headline
author: the author's name
publicationDate: the publication date as written on the page
publicationName: the name of the website or publication (for example "The New York Times")
featureImageUrl: the URL of the main feature image
articleBodyHtml: the complete body of the article as clean HTML

Rules

articleBodyHtml
Return the ENTIRE text of the article, from the first word to the last
Do not summarize, shorten or truncate anything
Leave the main feature image out of the body; it is handled separately
Drop navigation, headers, footers, ads, social widgets, comments and related-article links
Use only these tags: <p>, <b>, <strong>, <i>, <em>, <ul>, <ol>, <li>, <blockquote>, <h1>-<h6> for subheadings, <a> for links, <hr> for horizontal rules
Any image URL that remains must be absolute

featureImageUrl
Must be an absolute URL

Output format (JSON only)
Do not include any text outside the JSON object.
"""

PDF_TEXT_INSTRUCTIONS = """
You are a text formatting system. You will be given raw, unstructured text extracted from a PDF and the PDF's file name.
Return a single JSON object with these fields:

title: the document title, inferred from the text; use the file name if no title can be found
articleBodyHtml: the full text formatted as clean HTML, using <p> tags for paragraphs
author: optional, only when clearly identifiable in the text
publicationDate: optional, only when clearly identifiable in the text

Rules

The text has erratic line breaks. Rebuild the paragraphs so the result reads as a flowing article
Do not omit any text; articleBodyHtml must contain the complete, unabridged content

Output format (JSON only)
Do not include any text outside the JSON object.
"""

URL_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "author": {"type": "STRING"},
        "publicationDate": {"type": "STRING"},
        "publicationName": {"type": "STRING"},
        "featureImageUrl": {"type": "STRING"},
        "articleBodyHtml": {"type": "STRING"},
    },
    "required": ["title", "articleBodyHtml"],
}

PDF_TEXT_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "author": {"type": "STRING"},
        "publicationDate": {"type": "STRING"},
        "articleBodyHtml": {"type": "STRING"},
    },
    "required": ["title", "articleBodyHtml"],
}
