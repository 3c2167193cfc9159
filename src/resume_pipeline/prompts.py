"""
Prompt for one-page resume optimization.

The model receives this prompt together with the resume PDF and must answer
with a one-field JSON envelope holding a complete HTML document.
"""

from src.resume_pipeline.response_extractor import HTML_FIELDS

RESPONSE_FIELD = HTML_FIELDS[0]

OPTIMIZATION_RULES = """CRITICAL REQUIREMENTS:
1. Create a COMPLETE HTML document with DOCTYPE, html, head, and body tags
2. ALL CSS must be inline or in a <style> tag within the <head>
3. The resume MUST fit on EXACTLY ONE PAGE when converted to PDF (A4 format)
4. Use concise, impactful content to fit everything on one page
5. Optimize content for ATS (Applicant Tracking System)
6. Include relevant keywords from the job requirements
7. Use professional design with good spacing and typography
8. Focus on achievements and quantifiable results
9. Prioritize most relevant information for the job

DESIGN SPECIFICATIONS:
- Use A4 page dimensions (210mm x 297mm)
- Set appropriate margins (0.5in recommended)
- Use font sizes that ensure readability but maximize space efficiency
- Professional color scheme (blues, grays, or conservative colors)
- Clear section hierarchy with proper headings
- Efficient use of white space
- Modern, clean layout that's easy to scan

CONTENT OPTIMIZATION:
- Prioritize information most relevant to the job requirements
- Use bullet points for achievements, not duties
- Quantify results where possible (percentages, numbers, etc.)
- Keep descriptions concise and impactful
- Include relevant technical skills and keywords
- Remove or minimize less relevant information to fit one page

ONE-PAGE CONSTRAINT:
- This is NON-NEGOTIABLE - the entire resume must fit on one page
- Adjust content length, font sizes, and spacing as needed
- Prioritize quality over quantity of information
- Use efficient layouts (two columns if needed)"""


def build_optimization_prompt(job_requirements: str) -> str:
    """
    Build the instruction sent alongside the resume PDF.

    Args:
        job_requirements: Job description / requirements text from the user

    Returns:
        Prompt text asking for {"htmlres": "<html document>"}
    """
    return f"""You are an expert resume optimizer and designer. I will provide you with a resume PDF and job requirements.
Your task is to analyze the resume and create a completely optimized, professional, and visually appealing ONE-PAGE resume in HTML format.

{OPTIMIZATION_RULES}

JOB REQUIREMENTS:
{job_requirements.strip()}

IMPORTANT: Your response must be in this exact JSON format:
{{
  "{RESPONSE_FIELD}": "YOUR_COMPLETE_HTML_RESUME_HERE"
}}

The HTML should be a complete, self-contained document that will render perfectly as a single-page PDF. Include all necessary CSS styling within the HTML document.
"""
