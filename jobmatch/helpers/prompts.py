PARSER_SYSTEM_PROMPT = "You are a precise resume parser that returns only valid JSON."

EXTRACT_PROMPT = """You are a resume parser. Parse the following resume text and extract structured information in JSON format.

Extract the following information:
1. contact_info: name, email, phone, location, linkedin, github
2. skills: array of technical and soft skills mentioned
3. experience: array of work experiences with company, position, start_date, end_date, description, skills_used
4. education: array of educational background with institution, degree, field_of_study, graduation_date
5. summary: brief professional summary or objective (if present)

Important guidelines:
- For dates, use formats like "2020-01", "2023-12", or "2023" if only year is available
- If a field is not found, use null or empty array as appropriate
- Extract skills mentioned throughout the resume, not just from a skills section
- For skills_used in experience, extract relevant technical skills for each role
- If current job, use null for end_date

Resume text:
{resume_text}

Return only valid JSON in this exact format:
{{
  "contact_info": {{"name": null, "email": null, "phone": null, "location": null, "linkedin": null, "github": null}},
  "skills": ["skill1", "skill2"],
  "experience": [
    {{"company": "string", "position": "string", "start_date": "YYYY-MM", "end_date": null, "description": "string", "skills_used": ["skill1"]}}
  ],
  "education": [
    {{"institution": "string", "degree": "string", "field_of_study": null, "graduation_date": "YYYY"}}
  ],
  "summary": null
}}
"""

SCORING_SYSTEM_PROMPT = "You are a precise job matching AI that returns only valid JSON."

SCORING_PROMPT = """You are an AI job matching expert. Analyze the following resume and job descriptions to provide match scores and reasoning.

Resume:
{resume_text}

Job Descriptions:
{job_list}

For each job, provide:
1. A match score from 0.0 to 1.0 (where 1.0 is perfect match)
2. Brief reasoning for the score

Return your response as JSON in this exact format, with one entry per job in the same order:
{{
  "scores": [0.8, 0.6, 0.9],
  "reasoning": [
    "Strong match due to relevant skills and experience",
    "Partial match - missing some required skills",
    "Excellent match with all requirements met"
  ]
}}
"""

SKILL_GAP_SYSTEM_PROMPT = "You are a career development AI that provides skill gap analysis and learning recommendations."

SKILL_GAP_PROMPT = """Analyze the skill gap between user skills and job requirements.

User Skills: {user_skills}

Job Requirements: {job_requirements}

Provide:
1. Missing skills that the user needs to learn
2. Skills that need improvement
3. Recommended courses/resources

Return JSON in this format:
{{
  "missingSkills": ["skill1", "skill2"],
  "skillImprovements": ["skill3", "skill4"],
  "recommendedCourses": [
    {{"title": "Course Title", "description": "Course description", "url": "https://example.com"}}
  ]
}}
"""

SIMPLE_ANALYZE_PROMPT = """You are an expert resume parser. Extract structured information from this resume.

Resume Text:
{resume_text}

Extract and return ONLY a valid JSON object with this structure:
{{
  "name": "Full Name",
  "email": "email@example.com",
  "phone": "phone number",
  "skills": ["skill1", "skill2"],
  "experience": [
    {{"title": "Job Title", "company": "Company Name", "duration": "Jan 2020 - Present", "description": "Job description"}}
  ],
  "education": [
    {{"degree": "Degree Name", "institution": "University Name", "year": "2020"}}
  ],
  "summary": "Professional summary"
}}

Return ONLY the JSON, no other text.
"""

COACH_PROMPT = """Resume Analysis:
- Skills: {skills}
- Experience: {experience_count} positions
- Education: {education_count} degrees

User Question: {message}

Please provide helpful, specific advice based on this resume data.
"""
