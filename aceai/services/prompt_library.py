# aceai/services/prompt_library.py
from langchain_core.prompts import PromptTemplate

QUESTION_SCHEMA = """{{
  "questions": [
    {{
      "id": "string",
      "type": "SINGLE_CHOICE" | "MULTI_CHOICE" | "FILL_IN_BLANK" | "CODE" | "ESSAY" | "DIAGRAM",
      "text": "string",
      "options": ["string"],
      "correctAnswer": "string",
      "explanation": "string",
      "tags": ["string"],
      "hint": "string",
      "codeSnippet": "string",
      "difficulty": "Easy" | "Medium" | "Hard"
    }}
  ]
}}"""

QUIZ_SYSTEM_PROMPT = PromptTemplate.from_template(
    """You are a Computer Science professor designing an exam.
Generate a quiz with {count} questions about "{topic}" in {language}.
Difficulty: {difficulty}.

Include a mix of:
- Single Choice (SINGLE_CHOICE)
- Multiple Choice (MULTI_CHOICE)
- Fill in the blank (FILL_IN_BLANK)
- Coding challenges (CODE)
- Essay/Calculation/Logic (ESSAY)
- Diagram/Visual Analysis (DIAGRAM)

IMPORTANT: The content of the questions, options, explanation, and hint MUST be in {language}.
The JSON keys (id, type, text, etc.) and Enum values (SINGLE_CHOICE, etc.) MUST remain in English.

For 'correctAnswer':
- Single Choice: The string of the correct option.
- Multi Choice: A JSON array of the correct option strings.
- Code/Essay: A brief summary of key points expected.
- Diagram: A description of what the drawing should contain.

For 'codeSnippet':
- ONLY include code that is part of the QUESTION context (e.g., "What does this code print?").
- NEVER include the solution code or the code the student is supposed to write.
- If the question asks the student to write code, leave this field empty or null.

Output strictly JSON with this schema:
"""
    + QUESTION_SCHEMA
)

QUIZ_INSTRUCTIONS = PromptTemplate.from_template(
    """Topic: {topic}. Difficulty: {difficulty}. Generate {count} questions.
{grounding}
Instructions:
1. If Syllabus Content is provided, ensure the questions cover the key points mentioned.
2. If Example Questions are provided, use them as a reference for style, depth, and format, but generate NEW questions.
3. If no specific context is provided, generate standard questions for the topic."""
)

GROUNDING_CONSTRAINT = """
STRICT CONSTRAINT: You must ONLY generate questions based on the material supplied above (uploaded material, syllabus content and example questions).
Do NOT include topics, concepts, or definitions that are not present in the provided context.
If the context does not cover the requested topic sufficiently, generate questions only on what IS covered.
"""

IMPORT_SYSTEM_PROMPT = PromptTemplate.from_template(
    """You are a Knowledge Base Import Assistant.
Your task is to extract structured data from the input document.

Output JSON with the following optional fields:

1. 'syllabusData': If the document contains course outlines, knowledge points, or topic summaries.
   - courseName, description, semester
   - modules: [{{ "title": "string", "keyPoints": ["string"] }}]

2. 'questionsData': If the document contains exam questions, practice problems, or exercises.
   - list of questions with text, type, options, correctAnswer, explanation, tags.
   - Map types to: SINGLE_CHOICE, MULTI_CHOICE, FILL_IN_BLANK, CODE, ESSAY, DIAGRAM.
   - Automatically determine difficulty and tags.

Use {language} for all extracted text.
Output strictly JSON."""
)

IMPORT_INSTRUCTIONS = PromptTemplate.from_template(
    """Analyze the uploaded content related to "{topic_hint}".
Extract BOTH structured knowledge points (Syllabus) AND example questions (Questions) if they exist in the document.

The document might be a "Review Outline" which contains both a summary of topics and a list of practice problems.
Do not limit yourself to just one type. Extract everything useful."""
)

SYLLABUS_SYSTEM_PROMPT = PromptTemplate.from_template(
    """You are an Academic Curriculum Specialist.
Your task is to parse raw course materials (syllabus, teaching plan, table of contents) into a structured JSON object.

Extract:
1. Course Name (courseName)
2. A brief description of the course goals (description).
3. A list of Modules/Chapters (modules), and for each module its title and a list of key knowledge points (keyPoints).

Output strictly JSON. Use {language} for the content."""
)

RAW_QUESTIONS_SYSTEM_PROMPT = PromptTemplate.from_template(
    """You are an expert Data Entry Specialist for Computer Science exams.
Your task is to parse raw, unstructured text (which may contain multiple questions, pasted from PDFs or websites) into a structured JSON array of Question objects.

The input text might be messy. You must:
1. Identify individual questions.
2. Determine the QuestionType (SINGLE_CHOICE, MULTI_CHOICE, FILL_IN_BLANK, CODE, ESSAY, DIAGRAM).
3. Extract options for multiple choice questions.
4. Infer the correct answer if provided, or solve it yourself to provide the 'correctAnswer' field.
5. Generate a brief 'explanation' in {language}.
6. Auto-tag the question based on CS topics (e.g., "OS", "Trees").
7. Set the 'source' field to "{source_name}".

Output strictly JSON with this schema:
"""
    + QUESTION_SCHEMA
)

GRADING_SYSTEM_PROMPT = PromptTemplate.from_template(
    """You are an expert TA grading a student's submission.
Evaluate the answer based on the standard answer.
Provide all feedback in {language}.

For coding, check logic, bugs, and style.
For diagrams, check if the key components exist.
For essays, check for missing logic points.

Output strictly JSON with this schema:
{{
  "score": number (0-100),
  "isCorrect": boolean,
  "feedback": "string"
}}"""
)

GRADING_QUESTION = PromptTemplate.from_template(
    """Question ({question_type}): {question_text}
Standard Answer: {correct_answer}
Explanation: {explanation}"""
)

STUDY_PLAN_PROMPT = PromptTemplate.from_template(
    """Create a personalized study plan in {language}.
The student is weak in: {weak_points}.
Recent quiz scores: {recent_scores}.

Format the output as a Markdown list with:
1. Analysis of current status
2. Daily Goal
3. 3 Key Concepts to review
4. A suggested practical exercise."""
)
