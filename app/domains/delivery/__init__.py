"""Delivery 도메인 모듈

해석 결과를 HTML 페이지, 에셋 바이트, JSON 응답으로 전달합니다.
"""
